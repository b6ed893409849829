from __future__ import annotations

import pytest

from application.handlers.http_request_handler import HttpRequestStepHandler
from application.services.execution_deps import ExecutionDeps
from domain.events import parse_observer_events
from domain.exceptions import ConfigError, TransportError, ValidationError
from domain.parameters import ParameterSet
from domain.run import RunContext
from domain.steps.base import Step
from domain.steps.http import HttpRequestStep
from tests.fake_http_client import RecordingHttpClient, RecordingLogger


def _step(**kwargs) -> HttpRequestStep:
    return HttpRequestStep(id="req", name="req", **kwargs)


def _deps(logger: RecordingLogger) -> ExecutionDeps:
    return ExecutionDeps(logger=logger)


def test_supports_only_http_request_steps() -> None:
    handler = HttpRequestStepHandler(RecordingHttpClient())
    assert handler.supports(_step(url="http://example.test/")) is True
    assert handler.supports(Step(id="x", name="x")) is False


def test_url_only_succeeds_without_validation() -> None:
    # Arrange
    client = RecordingHttpClient(body=b"whatever")
    logger = RecordingLogger()
    handler = HttpRequestStepHandler(client)

    # Act
    resp = handler.execute(_step(url="http://example.test/ok"), _deps(logger))

    # Assert
    assert resp.status == 200
    assert client.last.ops("method") == [("method", "GET")]
    assert logger.events("http.response_matched") == []


def test_matching_body_logs_match_diagnostic() -> None:
    client = RecordingHttpClient(body=b"hello world")
    logger = RecordingLogger()

    HttpRequestStepHandler(client).execute(
        _step(url="http://example.test/echo", response_regex="/hello/"), _deps(logger)
    )

    matched = logger.events("http.response_matched")
    assert len(matched) == 1
    assert matched[0]["message"] == "The response body matched the provided regex."


def test_non_matching_body_raises_validation_error() -> None:
    client = RecordingHttpClient(body=b"goodbye")
    logger = RecordingLogger()

    with pytest.raises(ValidationError, match="did not match"):
        HttpRequestStepHandler(client).execute(
            _step(url="http://example.test/echo", response_regex="/hello/"), _deps(logger)
        )
    assert logger.events("http.response_matched") == []


def test_post_fields_reach_transport_in_order() -> None:
    client = RecordingHttpClient()
    step = _step(
        url="http://example.test/form",
        method="POST",
        post_parameters=ParameterSet([("name", "a"), ("name", "b")]),
    )

    HttpRequestStepHandler(client).execute(step, _deps(RecordingLogger()))

    assert client.last.ops("post") == [("post", "name", "a"), ("post", "name", "b")]


def test_post_fields_not_sent_for_get() -> None:
    client = RecordingHttpClient()
    step = _step(url="http://example.test/form", post_parameters=ParameterSet([("name", "a")]))

    HttpRequestStepHandler(client).execute(step, _deps(RecordingLogger()))

    assert client.last.ops("post") == []


def test_verbose_with_event_subset_logs_only_those_events() -> None:
    # Arrange
    client = RecordingHttpClient()
    logger = RecordingLogger()
    step = _step(
        url="http://example.test/ok",
        verbose=True,
        observer_events=parse_observer_events("connect,disconnect"),
    )

    # Act
    HttpRequestStepHandler(client).execute(step, _deps(logger))

    # Assert
    events = logger.events("http.event")
    assert [e["kind"] for e in events] == ["connect", "disconnect"]
    assert all(e["step_id"] == "req" for e in events)


def test_verbose_default_logs_all_events() -> None:
    client = RecordingHttpClient()
    logger = RecordingLogger()

    HttpRequestStepHandler(client).execute(_step(url="http://example.test/ok", verbose=True), _deps(logger))

    assert len(logger.events("http.event")) == 6


def test_not_verbose_attaches_no_observer() -> None:
    client = RecordingHttpClient()
    logger = RecordingLogger()

    HttpRequestStepHandler(client).execute(_step(url="http://example.test/ok"), _deps(logger))

    assert client.last.ops("attach") == []
    assert logger.events("http.event") == []


def test_missing_url_fails_before_any_transport_call() -> None:
    client = RecordingHttpClient()

    with pytest.raises(ConfigError):
        HttpRequestStepHandler(client).execute(_step(), _deps(RecordingLogger()))

    assert client.requests == []


def test_no_auth_user_attaches_no_credentials() -> None:
    client = RecordingHttpClient()

    HttpRequestStepHandler(client).execute(
        _step(url="http://example.test/ok", auth_password="pw", auth_scheme="digest"),
        _deps(RecordingLogger()),
    )

    assert client.last.ops("auth") == []


def test_transport_failure_is_surfaced() -> None:
    client = RecordingHttpClient(error=TransportError("HTTP request failed: timed out"))

    with pytest.raises(TransportError, match="timed out"):
        HttpRequestStepHandler(client).execute(_step(url="http://example.test/ok"), _deps(RecordingLogger()))


def test_error_status_is_logged_but_not_a_failure() -> None:
    client = RecordingHttpClient(status=503)
    logger = RecordingLogger()

    resp = HttpRequestStepHandler(client).execute(_step(url="http://example.test/ok"), _deps(logger))

    assert resp.status == 503
    assert logger.events("http.status_error")[0]["status"] == 503


def test_handle_stores_last_response_on_success() -> None:
    client = RecordingHttpClient(body=b"hello")
    ctx = RunContext()

    outcome = HttpRequestStepHandler(client).handle(
        _step(url="http://example.test/ok", response_regex="/hello/"), ctx, _deps(RecordingLogger())
    )

    assert outcome.ok is True
    assert ctx.last is not None
    assert ctx.last.content == b"hello"


@pytest.mark.parametrize(
    "client, step_kwargs, error_type",
    [
        (RecordingHttpClient(), {}, "ConfigError"),
        (RecordingHttpClient(error=OSError("refused")), {"url": "http://example.test/"}, "TransportError"),
        (RecordingHttpClient(body=b"nope"), {"url": "http://example.test/", "response_regex": "/yes/"}, "ValidationError"),
    ],
)
def test_handle_maps_typed_failures_to_outcome(client, step_kwargs, error_type) -> None:
    logger = RecordingLogger()
    ctx = RunContext()

    outcome = HttpRequestStepHandler(client).handle(_step(**step_kwargs), ctx, _deps(logger))

    assert outcome.ok is False
    assert outcome.error_type == error_type
    assert ctx.last is None
    assert logger.events("http_request.step_failed")[0]["error_type"] == error_type


def test_invalid_pattern_fails_before_any_transport_call() -> None:
    client = RecordingHttpClient()

    with pytest.raises(ConfigError, match="Invalid response regex"):
        HttpRequestStepHandler(client).execute(
            _step(url="http://example.test/", response_regex="/(oops/"), _deps(RecordingLogger())
        )

    assert client.requests == []
