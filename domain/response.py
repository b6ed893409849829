# domain/response.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class ResponseResult:
    status: int
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    content: bytes = b""
    reason: Optional[str] = None

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class ValidationOutcome:
    matched: bool
    pattern: str = ""

    @property
    def requested(self) -> bool:
        return self.pattern != ""
