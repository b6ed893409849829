# application/ports/http_client.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from domain.response import ResponseResult


class TransportObserver(ABC):
    @abstractmethod
    def notify(self, kind: str, **data: Any) -> None:
        """
        Receive one lifecycle event from the transport.
        """
        ...


class HttpRequestPort(ABC):
    """
    A single outbound request being assembled on the transport.
    """

    @abstractmethod
    def set_auth(self, user: str, password: str, scheme: str) -> None: ...

    @abstractmethod
    def set_config(self, name: str, value: str) -> None: ...

    @abstractmethod
    def set_header(self, name: str, value: str) -> None: ...

    @abstractmethod
    def set_method(self, method: str) -> None: ...

    @abstractmethod
    def add_post_parameter(self, name: str, value: str) -> None: ...

    @abstractmethod
    def attach(self, observer: TransportObserver) -> None: ...

    @abstractmethod
    def send(self) -> ResponseResult: ...


class HttpClientPort(ABC):
    @abstractmethod
    def new_request(self, url: str) -> HttpRequestPort:
        ...
