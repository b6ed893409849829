# domain/parameters.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple


@dataclass(frozen=True)
class Parameter:
    name: str
    value: str = ""


class ParameterSet:
    """
    Ordered name/value pairs used for headers, transport config and POST fields.

    Duplicate names are kept as separate entries in insertion order.
    """

    def __init__(self, pairs: Iterable[Tuple[str, str]] = ()):
        self._items: List[Parameter] = []
        self._sealed = False
        for name, value in pairs:
            self.add(name, value)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "ParameterSet":
        return cls(pairs)

    def add(self, name: str, value: str = "") -> Parameter:
        if self._sealed:
            raise TypeError("ParameterSet is sealed and can no longer be modified")
        param = Parameter(name=str(name), value="" if value is None else str(value))
        self._items.append(param)
        return param

    def seal(self) -> "ParameterSet":
        """Return an immutable copy of this set."""
        copy = ParameterSet(self.as_ordered_pairs())
        copy._sealed = True
        return copy

    @property
    def sealed(self) -> bool:
        return self._sealed

    def as_ordered_pairs(self) -> List[Tuple[str, str]]:
        return [(p.name, p.value) for p in self._items]

    def __iter__(self) -> Iterator[Parameter]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterSet):
            return NotImplemented
        return self.as_ordered_pairs() == other.as_ordered_pairs()

    def __repr__(self) -> str:
        return f"ParameterSet({self.as_ordered_pairs()!r})"
