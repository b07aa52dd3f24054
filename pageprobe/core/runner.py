from __future__ import annotations

"""Suite runner
---------------
Opens a browser page for a check suite, evaluates each check through the
Page predicates and returns a small result dict.
"""

from typing import Any, Optional

from pageprobe.core.browser import open_page
from pageprobe.core.page import Page
from pageprobe.core.playwright_client import PlaywrightQueryClient
from pageprobe.core.session import QueryClient
from pageprobe.core.suite_loader import Check, CheckSuite, STRATEGY_PREDICATES, COUNT_PREDICATES
from pageprobe.utils.config import Settings, get_settings
from pageprobe.utils.logger import get_logger
from pageprobe.utils.timing import measure


class Runner:
    """Runs check suites against a live browser page."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[QueryClient] = None):
        self.settings = settings or get_settings()
        self.client = client or PlaywrightQueryClient()
        self.log = get_logger(__name__)

    def evaluate(self, page: Page, check: Check) -> bool:
        """Dispatch one check to its predicate on `page`."""
        predicate = getattr(page, check.predicate.value)
        args: list[Any] = [check.value]
        kwargs: dict[str, Any] = {}
        if check.predicate in STRATEGY_PREDICATES:
            args.insert(0, check.strategy)
        if check.count is not None and check.predicate in COUNT_PREDICATES:
            kwargs["count"] = check.count
        return predicate(*args, **kwargs)

    def run_checks(self, session: Any, suite: CheckSuite, timeout_ms: Optional[int] = None) -> dict:
        """Evaluate every check of `suite` against an already open session."""
        page = Page(
            session,
            self.client,
            interval_ms=suite.interval_ms,
            timeout_ms=timeout_ms if timeout_ms is not None else suite.timeout_ms,
        )
        results = []
        for idx, check in enumerate(suite.checks, start=1):
            ok = self.evaluate(page, check)
            if not ok:
                self.log.warning(f"[{suite.name}] check {idx} failed: {check.label}")
            results.append({
                "index": idx,
                "predicate": check.predicate.value,
                "value": check.value,
                "name": check.name,
                "ok": ok,
            })
        passed = sum(1 for r in results if r["ok"])
        return {
            "ok": passed == len(results),
            "suite": suite.name,
            "url": suite.url,
            "passed": passed,
            "failed": len(results) - passed,
            "results": results,
        }

    @measure("run_suite")
    def run_suite(self, suite: CheckSuite, timeout_ms: Optional[int] = None) -> dict:
        """Open `suite.url` in a fresh browser and run its checks.

        Browser or query failures are reported in the result dict
        (`ok=False`, `error`, `error_type`) rather than raised.
        """
        self.log.info(f"Running suite '{suite.name}' ({len(suite.checks)} checks) on {suite.url}")
        try:
            with open_page(self.settings, url=suite.url) as session:
                result = self.run_checks(session, suite, timeout_ms=timeout_ms)
            self.log.info(f"Suite '{suite.name}': {result['passed']} passed, {result['failed']} failed")
            return result
        except Exception as e:
            self.log.exception(f"Suite '{suite.name}' aborted: {e}")
            return {
                "ok": False,
                "suite": suite.name,
                "url": suite.url,
                "error": str(e),
                "error_type": type(e).__name__,
            }


def run_suite(suite: CheckSuite, settings: Optional[Settings] = None, timeout_ms: Optional[int] = None) -> dict:
    """Convenience shim: run a suite with a default Runner."""
    return Runner(settings=settings).run_suite(suite, timeout_ms=timeout_ms)
