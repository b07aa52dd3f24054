# pageprobe/core/browser.py
from __future__ import annotations

"""Browser sessions
-------------------
Starts Playwright with the configured browser and yields a page that can be
used as a pageprobe session.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from playwright.sync_api import Page, sync_playwright

from pageprobe.utils.config import BrowserType, Settings, get_settings
from pageprobe.utils.logger import get_logger

log = get_logger(__name__)


@contextmanager
def open_page(settings: Optional[Settings] = None, url: Optional[str] = None) -> Iterator[Page]:
    """
    Launch a browser, open one page (navigating to `url` if given) and close
    everything when the block exits.
    """
    s = settings or get_settings()
    with sync_playwright() as p:
        if s.BROWSER_TYPE == BrowserType.firefox:
            browser_type = p.firefox
        elif s.BROWSER_TYPE == BrowserType.webkit:
            browser_type = p.webkit
        else:
            browser_type = p.chromium
        browser = browser_type.launch(**s.playwright_launch_kwargs())
        try:
            context = browser.new_context(**s.playwright_context_kwargs())
            page = context.new_page()
            page.set_default_timeout(s.PAGE_LOAD_TIMEOUT)
            if url:
                log.debug(f"Opening {url}")
                page.goto(url, wait_until="domcontentloaded", timeout=s.PAGE_LOAD_TIMEOUT)
            yield page
        finally:
            browser.close()
