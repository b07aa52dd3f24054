# pageprobe/selectors/finder.py
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Sequence, Tuple

from pageprobe.core.errors import InvalidSelectorError, UnknownLocatorKindError
from pageprobe.core.models import (
    Absent,
    CheckState,
    ElementResult,
    Found,
    Locator,
    Strategy,
    is_found,
)
from pageprobe.core.session import QueryClient
from pageprobe.selectors.escape import normalize_space, xpath_literal
from pageprobe.utils.logger import get_logger

log = get_logger(__name__)


class LocatorKind(str, Enum):
    fillable_field = "fillable_field"
    link = "link"
    button = "button"
    checkbox_or_radio = "checkbox_or_radio"
    select = "select"
    table = "table"

    @classmethod
    def parse(cls, value: "LocatorKind | str") -> "LocatorKind":
        if isinstance(value, LocatorKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(k.value for k in cls)
            raise UnknownLocatorKindError(f"Unknown locator kind {value!r}; expected one of: {allowed}") from None


# ---------- XPath element tests (used inside //*[...]) ----------

_NOT_FILLABLE_TYPES = ("submit", "image", "radio", "checkbox", "hidden", "file", "button", "reset")

FILLABLE_FIELD = "self::textarea or self::input[not(@type) or not({})]".format(
    " or ".join(f"@type='{t}'" for t in _NOT_FILLABLE_TYPES)
)
LINK = "self::a[@href]"
BUTTON = "self::button or self::input[@type='submit' or @type='reset' or @type='image' or @type='button']"
CHECKBOX_OR_RADIO = "self::input[@type='checkbox' or @type='radio']"
SELECT = "self::select"
TABLE = "self::table"


def _xp(xpath: str) -> Locator:
    return Locator(Strategy.xpath, xpath)


def _attr(element_test: str, attr: str) -> Callable[[str], Locator]:
    return lambda text: _xp(f"//*[{element_test}][@{attr}={xpath_literal(text)}]")


def _normalized(text: str) -> str:
    # same whitespace folding as normalize-space() on the page side
    return xpath_literal(normalize_space(text))


def _label_for(element_test: str) -> Callable[[str], Locator]:
    # <label for="x">Text</label> ... <input id="x">
    return lambda text: _xp(
        f"//*[{element_test}][@id=//label[normalize-space(string(.))={_normalized(text)}]/@for]"
    )


def _inside_label(element_test: str) -> Callable[[str], Locator]:
    # <label>Text <input></label>
    return lambda text: _xp(
        f"//label[normalize-space(string(.))={_normalized(text)}]//*[{element_test}]"
    )


def _text(element_test: str) -> Callable[[str], Locator]:
    return lambda text: _xp(f"//*[{element_test}][normalize-space(string(.))={_normalized(text)}]")


def _caption(text: str) -> Locator:
    return _xp(f"//table[caption[normalize-space(string(.))={_normalized(text)}]]")


# Ordered lookups per kind; the first locator that matches wins.
CANDIDATES: Dict[LocatorKind, List[Tuple[str, Callable[[str], Locator]]]] = {
    LocatorKind.fillable_field: [
        ("id", _attr(FILLABLE_FIELD, "id")),
        ("name", _attr(FILLABLE_FIELD, "name")),
        ("label[for]", _label_for(FILLABLE_FIELD)),
        ("label>field", _inside_label(FILLABLE_FIELD)),
        ("placeholder", _attr(FILLABLE_FIELD, "placeholder")),
    ],
    LocatorKind.link: [
        ("id", _attr(LINK, "id")),
        ("name", _attr(LINK, "name")),
        ("link text", lambda text: Locator(Strategy.link, text)),
        ("partial link text", lambda text: Locator(Strategy.partial_link, text)),
        ("title", _attr(LINK, "title")),
    ],
    LocatorKind.button: [
        ("id", _attr(BUTTON, "id")),
        ("name", _attr(BUTTON, "name")),
        ("value", _attr(BUTTON, "value")),
        ("text", _text(BUTTON)),
        ("title", _attr(BUTTON, "title")),
    ],
    LocatorKind.checkbox_or_radio: [
        ("id", _attr(CHECKBOX_OR_RADIO, "id")),
        ("name", _attr(CHECKBOX_OR_RADIO, "name")),
        ("label[for]", _label_for(CHECKBOX_OR_RADIO)),
        ("label>field", _inside_label(CHECKBOX_OR_RADIO)),
    ],
    LocatorKind.select: [
        ("id", _attr(SELECT, "id")),
        ("name", _attr(SELECT, "name")),
        ("label[for]", _label_for(SELECT)),
        ("label>select", _inside_label(SELECT)),
    ],
    LocatorKind.table: [
        ("id", _attr(TABLE, "id")),
        ("caption", _caption),
    ],
}


class Finder:
    """
    Single-shot element lookups against one session.

    `find()` maps a semantic kind plus human-facing text (id, name, label,
    link text, ...) to candidate locators and returns the first match.
    It never waits or retries; wrap it in `retry()` for that.
    """

    def __init__(self, session: Any, client: QueryClient) -> None:
        self.session = session
        self.client = client

    # ---------- Candidate building ----------

    def candidates(self, kind: LocatorKind | str, text: str) -> List[Tuple[str, Locator]]:
        """(how, locator) pairs to try for `text`, in order."""
        kind = LocatorKind.parse(kind)
        if not isinstance(text, str) or not text.strip():
            raise InvalidSelectorError(f"{kind.value} lookup text cannot be empty")
        return [(how, build(text)) for how, build in CANDIDATES[kind]]

    # ---------- Lookups ----------

    def find(self, kind: LocatorKind | str, text: str) -> ElementResult:
        return self.first_match(self.candidates(kind, text))

    def first_match(self, candidates: Sequence[Tuple[str, Locator]]) -> ElementResult:
        for how, loc in candidates:
            result = self.client.query_element(self.session, loc.strategy, loc.selector)
            if is_found(result):
                log.debug(f"matched by {how}: {loc}")
                return result
        return Absent()

    def find_by(self, strategy: Strategy | str, selector: str) -> ElementResult:
        loc = Locator(strategy, selector)
        return self.client.query_element(self.session, loc.strategy, loc.selector)

    def find_all(self, strategy: Strategy | str, selector: str) -> Sequence[Any]:
        loc = Locator(strategy, selector)
        return self.client.query_elements(self.session, loc.strategy, loc.selector)

    # ---------- Checkbox / radio state ----------

    def check_state(self, text: str) -> CheckState:
        return self.state_of(self.find(LocatorKind.checkbox_or_radio, text))

    def state_of(self, result: ElementResult) -> CheckState:
        if isinstance(result, Found):
            return CheckState.CHECKED if self.client.is_selected(result.element) else CheckState.UNCHECKED
        if isinstance(result, Absent):
            return CheckState.ABSENT
        raise TypeError(f"Expected Found or Absent, got {type(result).__name__}")
