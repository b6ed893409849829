# application/ports/requests_client.py
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from urllib.parse import quote, urlsplit

import requests
from requests.auth import AuthBase, HTTPBasicAuth, HTTPDigestAuth

from application.ports.http_client import HttpClientPort, HttpRequestPort, TransportObserver
from application.services.redactor import mask_dict
from domain.events import (
    CONNECT,
    DISCONNECT,
    RECEIVED_BODY,
    RECEIVED_HEADERS,
    SENT_BODY_PART,
    SENT_HEADERS,
)
from domain.exceptions import ConfigError, TransportError
from domain.response import ResponseResult
from domain.steps.http import AUTH_BASIC, AUTH_DIGEST, METHOD_GET

SessionFactory = Callable[[], requests.Session]

_AUTH_CLASSES = {
    AUTH_BASIC: HTTPBasicAuth,
    AUTH_DIGEST: HTTPDigestAuth,
}

_TRUE_VALUES = {"1", "true", "yes", "on", "t"}
_FALSE_VALUES = {"0", "false", "no", "off", "f", ""}


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"config '{name}' expects a boolean, got: {value!r}")


def _parse_seconds(name: str, value: Any) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"config '{name}' expects a number of seconds, got: {value!r}") from None
    if seconds <= 0:
        raise ConfigError(f"config '{name}' must be positive, got: {value!r}")
    return seconds


def _parse_int(name: str, value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ConfigError(f"config '{name}' expects an integer, got: {value!r}") from None


def _body_size(body: Union[bytes, str, None]) -> int:
    if body is None:
        return 0
    if isinstance(body, str):
        return len(body.encode("utf-8"))
    return len(body)


class RequestsHttpRequest(HttpRequestPort):
    """
    One request on a private requests.Session that is closed after send().
    """

    def __init__(
        self,
        url: str,
        session_factory: SessionFactory = requests.Session,
        base_headers: Optional[Dict[str, str]] = None,
    ):
        self._url = url
        self._session_factory = session_factory
        self._method = METHOD_GET
        self._auth: Optional[AuthBase] = None
        self._base_headers = dict(base_headers or {})
        self._headers: List[Tuple[str, str]] = []
        self._post: List[Tuple[str, str]] = []
        self._observers: List[TransportObserver] = []

        self._timeout: Optional[float] = None
        self._connect_timeout: Optional[float] = None
        self._follow_redirects = True
        self._max_redirects: Optional[int] = None
        self._verify_peer = True
        self._cafile: Optional[str] = None
        self._local_cert: Optional[str] = None
        self._proxy_url: Optional[str] = None
        self._proxy_parts: Dict[str, str] = {}

        self._config_setters: Dict[str, Callable[[str, str], None]] = {
            "timeout": self._set_timeout,
            "connect_timeout": self._set_connect_timeout,
            "follow_redirects": self._set_follow_redirects,
            "max_redirects": self._set_max_redirects,
            "ssl_verify_peer": self._set_verify_peer,
            "ssl_cafile": self._set_cafile,
            "ssl_local_cert": self._set_local_cert,
            "proxy": self._set_proxy,
            "proxy_host": self._set_proxy_part,
            "proxy_port": self._set_proxy_part,
            "proxy_user": self._set_proxy_part,
            "proxy_password": self._set_proxy_part,
        }

        self._connected_to: Optional[str] = None

    # --- HttpRequestPort -------------------------------------------------

    def set_auth(self, user: str, password: str, scheme: str) -> None:
        auth_cls = _AUTH_CLASSES.get((scheme or "").lower())
        if auth_cls is None:
            raise ConfigError(f"Unsupported auth scheme: {scheme}")
        self._auth = auth_cls(user, password or "")

    def set_config(self, name: str, value: str) -> None:
        setter = self._config_setters.get(name)
        if setter is None:
            raise ConfigError(f"Unknown transport config: {name}")
        setter(name, value)

    def set_header(self, name: str, value: str) -> None:
        self._headers.append((name, value))

    def set_method(self, method: str) -> None:
        self._method = method.upper()

    def add_post_parameter(self, name: str, value: str) -> None:
        self._post.append((name, value))

    def attach(self, observer: TransportObserver) -> None:
        self._observers.append(observer)

    def send(self) -> ResponseResult:
        session = self._session_factory()
        try:
            if self._max_redirects is not None:
                session.max_redirects = self._max_redirects

            hooks = {"response": [self._on_response]} if self._observers else None

            resp = session.request(
                method=self._method,
                url=self._url,
                headers=self._merged_headers(),
                data=self._post or None,     # list[tuple] keeps repeated names
                auth=self._auth,
                timeout=self._timeout_arg(),
                allow_redirects=self._follow_redirects,
                verify=self._verify_arg(),
                cert=self._local_cert,
                proxies=self._proxies_arg(),
                hooks=hooks,
            )
            content = resp.content or b""
            self._notify(RECEIVED_BODY, size=len(content))
        except requests.RequestException as exc:
            raise TransportError(f"HTTP request failed: {exc}") from exc
        finally:
            session.close()
            if self._connected_to is not None:
                self._notify(DISCONNECT, host=self._connected_to)

        return ResponseResult(
            status=resp.status_code,
            url=str(resp.url),
            headers=dict(resp.headers),
            content=content,
            reason=resp.reason,
        )

    # --- lifecycle events ------------------------------------------------

    def _notify(self, kind: str, **data: Any) -> None:
        for observer in self._observers:
            observer.notify(kind, **data)

    def _on_response(self, resp: requests.Response, *args: Any, **kwargs: Any) -> None:
        # fires once per hop, after the response headers arrived and before the body is read
        sent = resp.request
        parts = urlsplit(sent.url or self._url)
        port = parts.port or (443 if parts.scheme == "https" else 80)
        self._connected_to = parts.hostname
        self._notify(CONNECT, host=parts.hostname, port=port)
        self._notify(
            SENT_HEADERS,
            request_line=f"{sent.method} {sent.path_url}",
            headers=mask_dict(dict(sent.headers)),
        )
        if sent.body:
            self._notify(SENT_BODY_PART, size=_body_size(sent.body))
        self._notify(
            RECEIVED_HEADERS,
            status=resp.status_code,
            reason=resp.reason,
            headers=mask_dict(dict(resp.headers)),
        )

    # --- config ----------------------------------------------------------

    def _set_timeout(self, name: str, value: str) -> None:
        self._timeout = _parse_seconds(name, value)

    def _set_connect_timeout(self, name: str, value: str) -> None:
        self._connect_timeout = _parse_seconds(name, value)

    def _set_follow_redirects(self, name: str, value: str) -> None:
        self._follow_redirects = _parse_bool(name, value)

    def _set_max_redirects(self, name: str, value: str) -> None:
        self._max_redirects = _parse_int(name, value)

    def _set_verify_peer(self, name: str, value: str) -> None:
        self._verify_peer = _parse_bool(name, value)

    def _set_cafile(self, name: str, value: str) -> None:
        self._cafile = value or None

    def _set_local_cert(self, name: str, value: str) -> None:
        self._local_cert = value or None

    def _set_proxy(self, name: str, value: str) -> None:
        self._proxy_url = value or None

    def _set_proxy_part(self, name: str, value: str) -> None:
        self._proxy_parts[name] = value

    def _timeout_arg(self) -> Union[None, float, Tuple[Optional[float], Optional[float]]]:
        if self._connect_timeout is None:
            return self._timeout
        return (self._connect_timeout, self._timeout)

    def _verify_arg(self) -> Union[bool, str]:
        if not self._verify_peer:
            return False
        return self._cafile or True

    def _proxies_arg(self) -> Optional[Dict[str, str]]:
        url = self._proxy_url
        host = self._proxy_parts.get("proxy_host")
        if url is None and host:
            creds = ""
            user = self._proxy_parts.get("proxy_user")
            if user:
                creds = quote(user, safe="")
                password = self._proxy_parts.get("proxy_password")
                if password:
                    creds += ":" + quote(password, safe="")
                creds += "@"
            port = self._proxy_parts.get("proxy_port")
            url = f"http://{creds}{host}" + (f":{port}" if port else "")
        if url is None:
            return None
        return {"http": url, "https": url}

    def _merged_headers(self) -> Dict[str, str]:
        # repeated names are folded into one comma separated value, first spelling wins
        merged: Dict[str, str] = {}
        spelling: Dict[str, str] = {}
        for name, value in self._headers:
            key = name.lower()
            if key in spelling:
                merged[spelling[key]] = f"{merged[spelling[key]]}, {value}"
            else:
                spelling[key] = name
                merged[name] = value

        # client defaults only fill in names the step did not set
        out = {k: v for k, v in self._base_headers.items() if k.lower() not in spelling}
        out.update(merged)
        return out


class RequestsHttpClient(HttpClientPort):
    def __init__(
        self,
        base_headers: Optional[Dict[str, str]] = None,
        session_factory: SessionFactory = requests.Session,
    ):
        self._base_headers = dict(base_headers or {})
        self._session_factory = session_factory

    def new_request(self, url: str) -> RequestsHttpRequest:
        return RequestsHttpRequest(
            url,
            session_factory=self._session_factory,
            base_headers=self._base_headers,
        )
