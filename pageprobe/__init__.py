"""
pageprobe
---------
Polling page-state predicates for browser UI tests.

    from pageprobe import Page
    from pageprobe.core.playwright_client import PlaywrightQueryClient

    page = Page(playwright_page, PlaywrightQueryClient())
    assert page.has_css("table#fruit tr", count=3)
    assert page.has_no_text("Server error")
"""

from pageprobe.core.errors import (
    InvalidSelectorError,
    NoSessionError,
    PageProbeError,
    UnknownLocatorKindError,
    UnknownStrategyError,
)
from pageprobe.core.models import Absent, CheckState, Found, Locator, Strategy
from pageprobe.core.page import Page
from pageprobe.core.session import (
    QueryClient,
    clear_current_session,
    current_session,
    set_current_session,
    use_session,
)
from pageprobe.selectors.finder import Finder, LocatorKind
from pageprobe.utils.timing import retry

__all__ = [
    "Absent",
    "CheckState",
    "Finder",
    "Found",
    "InvalidSelectorError",
    "Locator",
    "LocatorKind",
    "NoSessionError",
    "Page",
    "PageProbeError",
    "QueryClient",
    "Strategy",
    "UnknownLocatorKindError",
    "UnknownStrategyError",
    "clear_current_session",
    "current_session",
    "retry",
    "set_current_session",
    "use_session",
]
