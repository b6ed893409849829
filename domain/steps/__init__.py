from domain.steps.base import Step
from domain.steps.http import AuthCredentials, HttpRequestSpec, HttpRequestStep

__all__ = [
    "Step",
    "AuthCredentials",
    "HttpRequestSpec",
    "HttpRequestStep",
]
