# application/executor/step_executor.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence
import time
import uuid

from application.handlers.base import StepHandler
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.run import RunContext
from domain.steps.base import Step


@dataclass(frozen=True)
class ExecutionResult:
    ok: bool
    failed_step_id: Optional[str] = None
    error_message: Optional[str] = None
    error_type: Optional[str] = None


class StepExecutor:
    """
    Run steps one after another; the first failed step aborts the run.
    """

    def __init__(self, handlers: Sequence[StepHandler]):
        self._handlers: List[StepHandler] = list(handlers)

    def execute(self, steps: List[Step], ctx: RunContext, deps: ExecutionDeps) -> ExecutionResult:
        if not getattr(ctx, "run_id", ""):
            ctx.run_id = uuid.uuid4().hex

        deps = deps.with_logger(deps.logger.bind(run_id=ctx.run_id))

        for step in steps:
            if getattr(step, "enabled", True) is False:
                deps.logger.debug("step.skipped", step_id=step.id)
                continue

            outcome = self._execute_step(step, ctx, deps)
            if not outcome.ok:
                return ExecutionResult(
                    ok=False,
                    failed_step_id=step.id,
                    error_message=outcome.error_message,
                    error_type=outcome.error_type,
                )

        return ExecutionResult(ok=True)

    def get_handler(self, step: Step) -> StepHandler:
        for h in self._handlers:
            if h.supports(step):
                return h
        raise RuntimeError(f"No handler found for step: {type(step).__name__} ({step.id})")

    def _execute_step(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        handler = self.get_handler(step)

        deps.logger.info("step.start", step_id=step.id, step_type=type(step).__name__)
        t0 = time.perf_counter()

        outcome = handler.handle(step, ctx, deps)

        deps.logger.info(
            "step.end",
            step_id=step.id,
            ok=(outcome is not None and outcome.ok),
            elapsed_ms=int((time.perf_counter() - t0) * 1000),
        )

        if outcome is None:
            raise RuntimeError(
                f"Handler returned None: handler={type(handler).__name__}, step={step.id} ({type(step).__name__})"
            )
        return outcome
