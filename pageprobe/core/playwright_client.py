# pageprobe/core/playwright_client.py
from __future__ import annotations

"""Playwright query client
--------------------------
Implements the QueryClient lookups over a Playwright sync `Page`, which acts
as the session. Every strategy is translated into a Playwright `css=` or
`xpath=` selector; caller text is escaped on the way in.
"""

import re
from typing import List

from playwright.sync_api import ElementHandle, Page

from pageprobe.core.errors import InvalidSelectorError
from pageprobe.core.models import Absent, ElementResult, Found, Strategy
from pageprobe.selectors.escape import css_attr_equals, css_identifier, link_text_xpath

_TAG_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")

# Detached nodes still evaluate in Playwright; report them as stale instead.
_IS_SELECTED_JS = """
el => {
  if (!el.isConnected) {
    throw new Error('stale element: node is no longer attached to the page');
  }
  return !!(el.checked || el.selected);
}
"""


def to_playwright_selector(strategy: Strategy | str, selector: str) -> str:
    """Translate a (strategy, selector) pair into a Playwright selector string."""
    strategy = Strategy.parse(strategy)
    if strategy == Strategy.css:
        return f"css={selector}"
    if strategy == Strategy.xpath:
        return f"xpath={selector}"
    if strategy == Strategy.id:
        return "css=" + css_attr_equals("id", selector)
    if strategy == Strategy.name:
        return "css=" + css_attr_equals("name", selector)
    if strategy == Strategy.class_name:
        return "css=." + css_identifier(selector)
    if strategy == Strategy.tag:
        if not _TAG_RE.match(selector):
            raise InvalidSelectorError(f"Invalid tag name {selector!r}")
        return f"css={selector}"
    if strategy == Strategy.link:
        return "xpath=" + link_text_xpath(selector)
    if strategy == Strategy.partial_link:
        return "xpath=" + link_text_xpath(selector, partial=True)
    raise InvalidSelectorError(f"No Playwright mapping for strategy {strategy.value!r}")


class PlaywrightQueryClient:
    """QueryClient backed by Playwright; the session is a `playwright.sync_api.Page`."""

    def query_elements(self, session: Page, strategy: Strategy, selector: str) -> List[ElementHandle]:
        return session.query_selector_all(to_playwright_selector(strategy, selector))

    def query_element(self, session: Page, strategy: Strategy, selector: str) -> ElementResult:
        handle = session.query_selector(to_playwright_selector(strategy, selector))
        if handle is None:
            return Absent()
        return Found(handle)

    def is_selected(self, element: ElementHandle) -> bool:
        return bool(element.evaluate(_IS_SELECTED_JS))
