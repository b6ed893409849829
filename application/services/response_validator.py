# application/services/response_validator.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Union

from domain.exceptions import ConfigError
from domain.response import ValidationOutcome

_MODIFIER_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}

_DELIMITERS = "/#~!@%|"


@dataclass(frozen=True)
class CompiledPattern:
    regex: Pattern
    text_mode: bool

    def search(self, body: bytes) -> bool:
        if self.text_mode:
            return self.regex.search(body.decode("utf-8", errors="replace")) is not None
        return self.regex.search(body) is not None


def _split_delimited(pattern: str) -> Optional[tuple[str, str]]:
    """
    "/expr/flags" -> ("expr", "flags"); None when the pattern is not delimited.
    """
    if len(pattern) < 2:
        return None
    opener = pattern[0]
    if opener not in _DELIMITERS:
        return None

    end = pattern.rfind(opener)
    if end <= 0:
        return None

    modifiers = pattern[end + 1:]
    if modifiers and not modifiers.isalpha():
        return None
    return pattern[1:end], modifiers


def compile_pattern(pattern: str) -> CompiledPattern:
    """
    Compile a body pattern with Python's re module.

    Patterns wrapped in delimiters ("/hello/i", "#^ok$#m") are unwrapped and
    their trailing modifiers mapped to re flags; "u" switches to text matching
    on the UTF-8 decoded body. Anything else is used as-is against raw bytes.
    """
    expr: str = pattern
    flags = 0
    text_mode = False

    split = _split_delimited(pattern)
    if split is not None:
        expr, modifiers = split
        for letter in modifiers:
            if letter == "u":
                text_mode = True
                continue
            flag = _MODIFIER_FLAGS.get(letter)
            if flag is None:
                raise ConfigError(f"Unsupported regex modifier '{letter}' in: {pattern}")
            flags |= flag

    source: Union[str, bytes] = expr if text_mode else expr.encode("utf-8")
    try:
        regex = re.compile(source, flags)
    except re.error as exc:
        raise ConfigError(f"Invalid response regex {pattern!r}: {exc}") from exc
    return CompiledPattern(regex=regex, text_mode=text_mode)


class ResponseValidator:
    def validate(self, body: Optional[bytes], pattern: str) -> ValidationOutcome:
        if pattern == "":
            return ValidationOutcome(matched=True, pattern=pattern)

        compiled = compile_pattern(pattern)
        return ValidationOutcome(matched=compiled.search(body or b""), pattern=pattern)

    def check_pattern(self, pattern: str) -> None:
        """Raise ConfigError for a pattern that cannot be compiled."""
        if pattern != "":
            compile_pattern(pattern)
