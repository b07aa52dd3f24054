# pageprobe/core/models.py
from __future__ import annotations

"""Lookup data model
--------------------
Strategies, locators and the two-variant element result shared by the
finder, the query clients and the page predicates.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pageprobe.core.errors import InvalidSelectorError, UnknownStrategyError


class Strategy(str, Enum):
    css = "css"
    xpath = "xpath"
    class_name = "class"
    id = "id"
    name = "name"
    link = "link"
    partial_link = "partial_link"
    tag = "tag"

    @classmethod
    def parse(cls, value: "Strategy | str") -> "Strategy":
        """Accept an enum member, its value, or a known alias."""
        if isinstance(value, Strategy):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _STRATEGY_ALIASES:
                return _STRATEGY_ALIASES[key]
            try:
                return cls(key)
            except ValueError:
                pass
        allowed = ", ".join(s.value for s in cls)
        raise UnknownStrategyError(f"Unknown strategy {value!r}; expected one of: {allowed}")


_STRATEGY_ALIASES = {
    "class_name": Strategy.class_name,
}


@dataclass(frozen=True)
class Locator:
    """One concrete (strategy, selector) pair."""
    strategy: Strategy
    selector: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "strategy", Strategy.parse(self.strategy))
        if not isinstance(self.selector, str) or not self.selector.strip():
            raise InvalidSelectorError(f"{self.strategy.value} selector cannot be empty")

    def __str__(self) -> str:
        return f"{self.strategy.value}:{self.selector}"


# ---------- Element lookup result ----------

@dataclass(frozen=True)
class Found:
    element: Any


@dataclass(frozen=True)
class Absent:
    pass


ElementResult = Union[Found, Absent]


def is_found(result: ElementResult) -> bool:
    if isinstance(result, Found):
        return True
    if isinstance(result, Absent):
        return False
    raise TypeError(f"Expected Found or Absent, got {type(result).__name__}")


class CheckState(str, Enum):
    CHECKED = "checked"
    UNCHECKED = "unchecked"
    ABSENT = "absent"


__all__ = [
    "Strategy",
    "Locator",
    "Found",
    "Absent",
    "ElementResult",
    "is_found",
    "CheckState",
]
