# domain/steps/base.py
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Step:
    id: str
    name: str
    enabled: bool = field(default=True, kw_only=True)
