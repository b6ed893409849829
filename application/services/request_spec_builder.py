# application/services/request_spec_builder.py
from __future__ import annotations

from application.ports.logger import LoggerPort
from application.services.redactor import mask_pairs
from domain.exceptions import ConfigError
from domain.parameters import ParameterSet
from domain.steps.http import (
    DEFAULT_AUTH_SCHEME,
    DEFAULT_METHOD,
    METHOD_POST,
    AuthCredentials,
    HttpRequestSpec,
    HttpRequestStep,
)


class RequestSpecBuilder:
    """
    Turn step configuration into an immutable HttpRequestSpec.
    """

    def build(self, step: HttpRequestStep) -> HttpRequestSpec:
        url = (step.url or "").strip()
        if not url:
            raise ConfigError('Missing attribute "url"')

        auth = None
        if step.auth_user:
            auth = AuthCredentials(
                user=step.auth_user,
                password=step.auth_password or "",
                scheme=step.auth_scheme or DEFAULT_AUTH_SCHEME,
            )

        method = (step.method or DEFAULT_METHOD).strip().upper()
        if not method:
            method = DEFAULT_METHOD

        post_parameters = step.post_parameters if method == METHOD_POST else ParameterSet()

        return HttpRequestSpec(
            url=url,
            method=method,
            auth=auth,
            transport_config=step.config.seal(),
            headers=step.headers.seal(),
            post_parameters=post_parameters.seal(),
        )

    def describe(self, spec: HttpRequestSpec, logger: LoggerPort, step_id: str) -> None:
        logger.info(
            "http.request",
            step_id=step_id,
            method=spec.method,
            url=spec.url,
            auth_user=spec.auth.user if spec.auth else None,
            auth_scheme=spec.auth.scheme if spec.auth else None,
            config=mask_pairs(spec.transport_config.as_ordered_pairs()),
            headers=mask_pairs(spec.headers.as_ordered_pairs()),
            form=mask_pairs(spec.post_parameters.as_ordered_pairs()),
        )
