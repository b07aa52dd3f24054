# pageprobe/core/page.py
from __future__ import annotations

"""Page predicates
------------------
Boolean questions about the current state of a page, for use in asserts:

    page = Page(session, client)
    assert page.has_css("table#fruit tr.first")

Every predicate polls through `retry()`, so it tolerates pages that are
still being changed by JavaScript. Use the `has_no_*` form to check that
something is gone: `assert page.has_no_css("h2.foo")` waits for the element
to disappear, while `assert not page.has_css("h2.foo")` fails as soon as the
element is still seen and otherwise only passes after the whole timeout.
"""

from typing import Any, Callable, Optional

from pageprobe.core.models import CheckState, Locator, Strategy, is_found
from pageprobe.core.session import QueryClient, current_session
from pageprobe.selectors.escape import text_contains_xpath
from pageprobe.selectors.finder import Finder, LocatorKind
from pageprobe.utils.timing import retry


class Page:
    """State predicates bound to one browser session."""

    def __init__(
        self,
        session: Any,
        client: QueryClient,
        *,
        interval_ms: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ) -> None:
        self.session = session
        self.client = client
        self.finder = Finder(session, client)
        self.interval_ms = interval_ms
        self.timeout_ms = timeout_ms

    @classmethod
    def current(cls, client: QueryClient, **timing: Optional[int]) -> "Page":
        """Page over the ambient session (raises NoSessionError if unset)."""
        return cls(current_session(), client, **timing)

    def _retry(self, probe: Callable[[], bool], description: str) -> bool:
        return retry(
            probe,
            interval_ms=self.interval_ms,
            timeout_ms=self.timeout_ms,
            description=description,
        )

    # ---------- Shapes ----------

    def _exists(self, kind: LocatorKind, text: str) -> bool:
        candidates = self.finder.candidates(kind, text)
        return self._retry(lambda: is_found(self.finder.first_match(candidates)), f"has {kind.value} {text!r}")

    def _not_exists(self, kind: LocatorKind, text: str) -> bool:
        candidates = self.finder.candidates(kind, text)
        return self._retry(lambda: not is_found(self.finder.first_match(candidates)), f"has no {kind.value} {text!r}")

    def _field_state_is(self, text: str, state: CheckState, expected: bool) -> bool:
        candidates = self.finder.candidates(LocatorKind.checkbox_or_radio, text)

        def probe() -> bool:
            actual = self.finder.state_of(self.finder.first_match(candidates))
            return (actual == state) == expected

        verb = "has" if expected else "has no"
        return self._retry(probe, f"{verb} {state.value} field {text!r}")

    # ---------- Raw selectors ----------

    def has_selector(self, strategy: Strategy | str, selector: str, count: Optional[int] = None) -> bool:
        """
        Does the page have an element matching `selector`, looked up with
        `strategy`?

        Strategy may be one of:
          * class (alias class_name) - elements with the given class
          * css - a CSS selector
          * id - element with the given id attribute
          * name - element with the given name attribute
          * link - link whose text is exactly the given text
          * partial_link - link whose text contains the given text
          * tag - elements of the given HTML tag
          * xpath - an XPath expression

        With `count`, the page must have exactly that many matches.
        """
        loc = Locator(strategy, selector)
        if count is not None:
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise ValueError(f"count must be a non-negative integer, got {count!r}")
            return self._retry(
                lambda: len(self.client.query_elements(self.session, loc.strategy, loc.selector)) == count,
                f"has {count} x {loc}",
            )
        return self._retry(
            lambda: is_found(self.client.query_element(self.session, loc.strategy, loc.selector)),
            f"has {loc}",
        )

    def has_no_selector(self, strategy: Strategy | str, selector: str) -> bool:
        """The page has no element matching `selector` under `strategy`."""
        loc = Locator(strategy, selector)
        return self._retry(
            lambda: not is_found(self.client.query_element(self.session, loc.strategy, loc.selector)),
            f"has no {loc}",
        )

    def has_css(self, css: str, count: Optional[int] = None) -> bool:
        """Does the page have an element matching the CSS selector (exactly `count` of them, if given)?"""
        return self.has_selector(Strategy.css, css, count=count)

    def has_no_css(self, css: str) -> bool:
        return self.has_no_selector(Strategy.css, css)

    def has_xpath(self, xpath: str, count: Optional[int] = None) -> bool:
        """Does the page have an element matching the XPath (exactly `count` of them, if given)?"""
        return self.has_selector(Strategy.xpath, xpath, count=count)

    def has_no_xpath(self, xpath: str) -> bool:
        return self.has_no_selector(Strategy.xpath, xpath)

    # ---------- Text ----------

    def has_text(self, text: str) -> bool:
        """Does some element on the page contain `text`?"""
        return self.has_selector(Strategy.xpath, text_contains_xpath(text))

    def has_no_text(self, text: str) -> bool:
        return self.has_no_selector(Strategy.xpath, text_contains_xpath(text))

    # ---------- Semantic lookups ----------

    def has_field(self, text: str) -> bool:
        """Text field or textarea, by id, name, label or placeholder."""
        return self._exists(LocatorKind.fillable_field, text)

    def has_no_field(self, text: str) -> bool:
        return self._not_exists(LocatorKind.fillable_field, text)

    def has_link(self, text: str) -> bool:
        """Link, by id, name, text or title."""
        return self._exists(LocatorKind.link, text)

    def has_no_link(self, text: str) -> bool:
        return self._not_exists(LocatorKind.link, text)

    def has_button(self, text: str) -> bool:
        """Button, by id, name, value, text or title."""
        return self._exists(LocatorKind.button, text)

    def has_no_button(self, text: str) -> bool:
        return self._not_exists(LocatorKind.button, text)

    def has_select(self, text: str) -> bool:
        """Select box, by id, name or label."""
        return self._exists(LocatorKind.select, text)

    def has_no_select(self, text: str) -> bool:
        return self._not_exists(LocatorKind.select, text)

    def has_table(self, text: str) -> bool:
        """Table, by id or caption."""
        return self._exists(LocatorKind.table, text)

    def has_no_table(self, text: str) -> bool:
        return self._not_exists(LocatorKind.table, text)

    # ---------- Checkbox / radio state ----------
    # A missing field is neither checked nor unchecked.

    def has_checked_field(self, text: str) -> bool:
        """Checkbox or radio button, by id, name or label, that is checked."""
        return self._field_state_is(text, CheckState.CHECKED, True)

    def has_no_checked_field(self, text: str) -> bool:
        return self._field_state_is(text, CheckState.CHECKED, False)

    def has_unchecked_field(self, text: str) -> bool:
        """Checkbox or radio button, by id, name or label, that is not checked."""
        return self._field_state_is(text, CheckState.UNCHECKED, True)

    def has_no_unchecked_field(self, text: str) -> bool:
        return self._field_state_is(text, CheckState.UNCHECKED, False)


__all__ = ["Page"]
