# application/handlers/http_request_handler.py
from __future__ import annotations

from typing import Optional

from application.event_recorder import EventRecorder
from application.handlers.base import StepHandler
from application.outcome import StepOutcome
from application.ports.http_client import HttpClientPort
from application.request_executor import RequestExecutor
from application.services.execution_deps import ExecutionDeps
from application.services.redactor import mask_dict
from application.services.request_spec_builder import RequestSpecBuilder
from application.services.response_validator import ResponseValidator
from domain.exceptions import StepError, ValidationError
from domain.response import ResponseResult
from domain.run import RunContext
from domain.steps.http import HttpRequestStep


class HttpRequestStepHandler(StepHandler):
    """
    Send the configured request and check the body against ``response_regex``.

    ``execute`` raises ConfigError, TransportError or ValidationError;
    ``handle`` turns those into a failed StepOutcome for the step executor.
    """

    def __init__(
        self,
        http_client: HttpClientPort,
        builder: Optional[RequestSpecBuilder] = None,
        validator: Optional[ResponseValidator] = None,
    ):
        self._executor = RequestExecutor(http_client)
        self._builder = builder or RequestSpecBuilder()
        self._validator = validator or ResponseValidator()

    def supports(self, step) -> bool:
        return isinstance(step, HttpRequestStep)

    def execute(self, step: HttpRequestStep, deps: ExecutionDeps) -> ResponseResult:
        spec = self._builder.build(step)
        self._validator.check_pattern(step.response_regex)
        self._builder.describe(spec, deps.logger, step.id)

        recorder: Optional[EventRecorder] = None
        if step.verbose:
            recorder = EventRecorder(
                deps.logger.bind(step_id=step.id),
                events=step.observer_events,
                enabled=True,
            )

        resp = self._executor.send(spec, recorder)

        deps.logger.info(
            "http.response",
            step_id=step.id,
            status=resp.status,
            final_url=resp.url,
            headers=mask_dict(resp.headers),
            body_len=len(resp.content),
        )
        if resp.status >= 400:
            deps.logger.warning("http.status_error", step_id=step.id, status=resp.status, reason=resp.reason)

        outcome = self._validator.validate(resp.content, step.response_regex)
        if not outcome.matched:
            raise ValidationError("The received response body did not match the given regular expression")
        if outcome.requested:
            deps.logger.info(
                "http.response_matched",
                step_id=step.id,
                pattern=step.response_regex,
                message="The response body matched the provided regex.",
            )
        return resp

    def handle(self, step: HttpRequestStep, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        try:
            ctx.last = self.execute(step, deps)
            return StepOutcome(ok=True)
        except StepError as e:
            deps.logger.error(
                "http_request.step_failed",
                step_id=getattr(step, "id", "unknown"),
                error_type=type(e).__name__,
                error=str(e),
            )
            return StepOutcome(ok=False, error_message=str(e), error_type=type(e).__name__)
