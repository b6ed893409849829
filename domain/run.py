# domain/run.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from domain.response import ResponseResult


@dataclass
class RunContext:
    run_id: str = ""
    last: Optional[ResponseResult] = None
