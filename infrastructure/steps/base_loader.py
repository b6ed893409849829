# infrastructure/steps/base_loader.py
"""
Build HttpRequestStep objects from a parsed build file.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from domain.events import parse_observer_events
from domain.parameters import ParameterSet
from domain.steps.http import HttpRequestStep


class StepConfigLoadError(Exception):
    pass


_TRUE_VALUES = {"1", "true", "yes", "on", "t"}

# build file attribute -> HttpRequestStep field
_ALIASES = {
    "url": "url",
    "responseRegex": "response_regex",
    "response_regex": "response_regex",
    "verbose": "verbose",
    "observerEvents": "observer_events",
    "observer_events": "observer_events",
    "method": "method",
    "authUser": "auth_user",
    "auth_user": "auth_user",
    "authPassword": "auth_password",
    "auth_password": "auth_password",
    "authScheme": "auth_scheme",
    "auth_scheme": "auth_scheme",
    "headers": "headers",
    "header": "headers",
    "config": "config",
    "postParameters": "post_parameters",
    "post_parameters": "post_parameters",
    "postParameter": "post_parameters",
}

_COMMON_KEYS = {"id", "name", "enabled"}


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class StepConfigLoaderBase(ABC):
    def load_from_file(self, path: str | Path) -> List[HttpRequestStep]:
        p = Path(path)
        if not p.exists():
            raise StepConfigLoadError(f"Step file not found: {p}")

        try:
            data = self._load_file(p)
        except StepConfigLoadError:
            raise
        except Exception as exc:
            raise StepConfigLoadError(f"Unable to parse step file {p}: {exc}") from exc

        if data is None:
            raise StepConfigLoadError(f"Step file is empty: {p}")
        if not isinstance(data, dict):
            raise StepConfigLoadError(f"Step file is invalid: {p}")

        return self.load_from_dict(data)

    def load_from_dict(self, data: Dict[str, Any]) -> List[HttpRequestStep]:
        steps_data = data.get("steps") or []
        if not isinstance(steps_data, list):
            raise StepConfigLoadError("'steps' must be a list")

        steps: List[HttpRequestStep] = []
        for index, step_data in enumerate(steps_data):
            if not isinstance(step_data, dict):
                raise StepConfigLoadError(f"steps[{index}] must be a mapping")
            steps.append(self.load_step(step_data, default_id=f"step-{index + 1}"))
        return steps

    def load_step(self, data: Dict[str, Any], default_id: str = "step") -> HttpRequestStep:
        step_id = str(data.get("id", default_id))
        kwargs: Dict[str, Any] = {
            "id": step_id,
            "name": str(data.get("name", step_id)),
            "enabled": parse_bool(data.get("enabled", True)),
        }

        for key, value in data.items():
            if key in _COMMON_KEYS:
                continue
            field_name = _ALIASES.get(key)
            if field_name is None:
                raise StepConfigLoadError(f"Unknown attribute '{key}' in step '{step_id}'")
            kwargs[field_name] = self._convert(field_name, value, step_id)

        return HttpRequestStep(**kwargs)

    def _convert(self, field_name: str, value: Any, step_id: str) -> Any:
        if field_name == "verbose":
            return parse_bool(value)
        if field_name == "observer_events":
            return parse_observer_events(value)
        if field_name in ("headers", "config", "post_parameters"):
            return self._load_parameters(value, field_name, step_id)
        if field_name in ("response_regex", "auth_password"):
            return "" if value is None else str(value)
        return _optional_str(value)

    def _load_parameters(self, items: Any, field_name: str, step_id: str) -> ParameterSet:
        params = ParameterSet()
        if items is None:
            return params
        if isinstance(items, dict):
            items = [[k, v] for k, v in items.items()]
        if not isinstance(items, Iterable) or isinstance(items, (str, bytes)):
            raise StepConfigLoadError(f"'{field_name}' in step '{step_id}' must be a list")

        for item in items:
            if isinstance(item, dict) and "name" in item:
                params.add(str(item["name"]), "" if item.get("value") is None else str(item["value"]))
            elif isinstance(item, (list, tuple)) and len(item) == 2:
                params.add(str(item[0]), "" if item[1] is None else str(item[1]))
            else:
                raise StepConfigLoadError(
                    f"'{field_name}' entries in step '{step_id}' must be [name, value] or {{name, value}}: {item!r}"
                )
        return params

    @abstractmethod
    def _load_file(self, path: Path) -> Any:
        ...
