# domain/steps/http.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from domain.events import DEFAULT_OBSERVER_EVENTS
from domain.parameters import ParameterSet
from domain.steps.base import Step

METHOD_GET = "GET"
METHOD_POST = "POST"
DEFAULT_METHOD = METHOD_GET

AUTH_BASIC = "basic"
AUTH_DIGEST = "digest"
DEFAULT_AUTH_SCHEME = AUTH_BASIC


@dataclass(frozen=True)
class AuthCredentials:
    user: str
    password: str = ""
    scheme: str = DEFAULT_AUTH_SCHEME


@dataclass(frozen=True)
class HttpRequestSpec:
    url: str
    method: str = DEFAULT_METHOD
    auth: Optional[AuthCredentials] = None
    headers: ParameterSet = field(default_factory=lambda: ParameterSet().seal())
    transport_config: ParameterSet = field(default_factory=lambda: ParameterSet().seal())
    post_parameters: ParameterSet = field(default_factory=lambda: ParameterSet().seal())

    @property
    def is_post(self) -> bool:
        return self.method == METHOD_POST


@dataclass(frozen=True)
class HttpRequestStep(Step):
    """Step configuration as read from a build file or the command line."""
    url: Optional[str] = None
    response_regex: str = ""
    verbose: bool = False
    observer_events: Tuple[str, ...] = DEFAULT_OBSERVER_EVENTS
    method: Optional[str] = None
    auth_user: Optional[str] = None
    auth_password: str = ""
    auth_scheme: Optional[str] = None
    headers: ParameterSet = field(default_factory=ParameterSet)
    config: ParameterSet = field(default_factory=ParameterSet)
    post_parameters: ParameterSet = field(default_factory=ParameterSet)
