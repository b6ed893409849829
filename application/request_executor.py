# application/request_executor.py
from __future__ import annotations

from typing import Optional

from application.event_recorder import EventRecorder
from application.ports.http_client import HttpClientPort, HttpRequestPort
from domain.exceptions import StepError, TransportError
from domain.response import ResponseResult
from domain.steps.http import HttpRequestSpec


class RequestExecutor:
    """
    Send one HttpRequestSpec through the transport.

    Fields are applied in a fixed order: auth, transport config, headers,
    method and finally POST parameters (POST only).
    """

    def __init__(self, http_client: HttpClientPort):
        self._http = http_client

    def send(self, spec: HttpRequestSpec, recorder: Optional[EventRecorder] = None) -> ResponseResult:
        request = self._http.new_request(spec.url)
        self._apply(spec, request)

        if recorder is not None and recorder.enabled:
            request.attach(recorder)

        try:
            return request.send()
        except StepError:
            raise
        except Exception as exc:
            raise TransportError(f"HTTP request failed: {exc}") from exc

    def _apply(self, spec: HttpRequestSpec, request: HttpRequestPort) -> None:
        if spec.auth is not None:
            request.set_auth(spec.auth.user, spec.auth.password, spec.auth.scheme)

        for name, value in spec.transport_config.as_ordered_pairs():
            request.set_config(name, value)

        for name, value in spec.headers.as_ordered_pairs():
            request.set_header(name, value)

        request.set_method(spec.method)
        if spec.is_post:
            for name, value in spec.post_parameters.as_ordered_pairs():
                request.add_post_parameter(name, value)
