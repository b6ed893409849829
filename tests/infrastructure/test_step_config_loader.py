from __future__ import annotations

from pathlib import Path

import pytest

from domain.events import DEFAULT_OBSERVER_EVENTS
from domain.steps.http import HttpRequestStep
from infrastructure.steps import (
    JsonStepConfigLoader,
    StepConfigLoadError,
    StepConfigLoaderRegistry,
    YamlStepConfigLoader,
)


def test_yaml_loader_parses_steps(tmp_path: Path) -> None:
    path = tmp_path / "build.yaml"
    path.write_text(
        """
steps:
  - id: login
    url: http://example.test/login
    method: POST
    responseRegex: "/welcome/i"
    verbose: "yes"
    observerEvents: "connect, disconnect"
    authUser: admin
    authPassword: secret
    authScheme: digest
    headers:
      - [X-Trace, "1"]
      - {name: X-Trace, value: "2"}
    config:
      timeout: 5
    postParameters:
      - [name, a]
      - [name, b]
  - url: http://example.test/health
""".lstrip(),
        encoding="utf-8",
    )

    steps = YamlStepConfigLoader().load_from_file(path)

    assert len(steps) == 2
    login = steps[0]
    assert isinstance(login, HttpRequestStep)
    assert login.id == "login"
    assert login.method == "POST"
    assert login.response_regex == "/welcome/i"
    assert login.verbose is True
    assert login.observer_events == ("connect", "disconnect")
    assert (login.auth_user, login.auth_password, login.auth_scheme) == ("admin", "secret", "digest")
    assert login.headers.as_ordered_pairs() == [("X-Trace", "1"), ("X-Trace", "2")]
    assert login.config.as_ordered_pairs() == [("timeout", "5")]
    assert login.post_parameters.as_ordered_pairs() == [("name", "a"), ("name", "b")]

    health = steps[1]
    assert health.id == "step-2"
    assert health.verbose is False
    assert health.observer_events == DEFAULT_OBSERVER_EVENTS
    assert health.response_regex == ""


def test_json_loader_accepts_snake_case(tmp_path: Path) -> None:
    path = tmp_path / "build.json"
    path.write_text(
        '{"steps": [{"id": "s", "url": "http://example.test/", "response_regex": "ok",'
        ' "post_parameters": [["a", "1"]], "verbose": false, "enabled": false}]}',
        encoding="utf-8",
    )

    steps = JsonStepConfigLoader().load_from_file(path)

    assert steps[0].response_regex == "ok"
    assert steps[0].post_parameters.as_ordered_pairs() == [("a", "1")]
    assert steps[0].verbose is False
    assert steps[0].enabled is False


def test_missing_url_is_not_a_load_error() -> None:
    steps = YamlStepConfigLoader().load_from_dict({"steps": [{"id": "nourl"}]})
    assert steps[0].url is None


@pytest.mark.parametrize("raw, expected", [(True, True), ("on", True), ("1", True), ("false", False), ("nope", False)])
def test_verbose_values(raw, expected) -> None:
    steps = YamlStepConfigLoader().load_from_dict({"steps": [{"url": "http://x/", "verbose": raw}]})
    assert steps[0].verbose is expected


def test_unknown_attribute_is_rejected() -> None:
    with pytest.raises(StepConfigLoadError, match="Unknown attribute 'retries'"):
        YamlStepConfigLoader().load_from_dict({"steps": [{"url": "http://x/", "retries": 3}]})


def test_malformed_parameter_entry_is_rejected() -> None:
    with pytest.raises(StepConfigLoadError, match="headers"):
        YamlStepConfigLoader().load_from_dict({"steps": [{"url": "http://x/", "headers": [["only-name"]]}]})


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(StepConfigLoadError, match="not found"):
        YamlStepConfigLoader().load_from_file(tmp_path / "missing.yaml")


def test_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(StepConfigLoadError, match="empty"):
        YamlStepConfigLoader().load_from_file(path)


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StepConfigLoadError, match="Unable to parse"):
        JsonStepConfigLoader().load_from_file(path)


def test_registry_picks_loader_by_suffix(tmp_path: Path) -> None:
    registry = StepConfigLoaderRegistry()
    assert isinstance(registry.get_loader(Path("a.yml")), YamlStepConfigLoader)
    assert isinstance(registry.get_loader(Path("a.JSON")), JsonStepConfigLoader)
    with pytest.raises(StepConfigLoadError, match="Unsupported"):
        registry.get_loader(Path("a.xml"))
