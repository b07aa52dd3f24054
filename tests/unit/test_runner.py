from contextlib import contextmanager

from pageprobe.core import runner as runner_mod
from pageprobe.core.runner import Runner
from pageprobe.core.suite_loader import CheckSuite
from pageprobe.selectors.finder import Finder

from fakes import FakeClient, FakeElement, TransportError


def make_suite(**overrides) -> CheckSuite:
    data = {
        "name": "fruit",
        "url": "https://example.com/fruit",
        "timeout_ms": 30,
        "interval_ms": 2,
        "checks": [
            {"predicate": "has_css", "value": "table#fruit tr", "count": 2},
            {"predicate": "has_selector", "strategy": "id", "value": "basket"},
            {"predicate": "has_no_text", "value": "Server error"},
            {"predicate": "has_checked_field", "value": "organic", "name": "organic only"},
        ],
    }
    data.update(overrides)
    return CheckSuite.model_validate(data)


def fruit_client(session) -> FakeClient:
    client = FakeClient()
    client.set("css", "table#fruit tr", [FakeElement("r1"), FakeElement("r2")])
    client.set("id", "basket", [FakeElement("basket")])
    _, loc = Finder(session, client).candidates("checkbox_or_radio", "organic")[0]
    client.set(loc.strategy, loc.selector, [FakeElement("organic", selected=False)])
    return client


def test_run_checks_reports_each_check():
    session = object()
    result = Runner(client=fruit_client(session)).run_checks(session, make_suite())
    assert result["ok"] is False
    assert (result["passed"], result["failed"]) == (3, 1)
    assert [r["ok"] for r in result["results"]] == [True, True, True, False]
    assert result["results"][3]["name"] == "organic only"


def test_timeout_override_wins():
    session = object()
    suite = make_suite(timeout_ms=5000, checks=[{"predicate": "has_css", "value": ".never"}])
    client = FakeClient()
    result = Runner(client=client).run_checks(session, suite, timeout_ms=0)
    assert result["ok"] is False
    assert len(client.calls) == 1


def test_run_suite_opens_page_and_closes_it(monkeypatch):
    session = object()
    opened = []

    @contextmanager
    def fake_open_page(settings=None, url=None):
        opened.append(url)
        yield session
        opened.append("closed")

    monkeypatch.setattr(runner_mod, "open_page", fake_open_page)
    suite = make_suite(checks=[{"predicate": "has_selector", "strategy": "id", "value": "basket"}])
    result = Runner(client=fruit_client(session)).run_suite(suite)
    assert result["ok"] is True
    assert opened == ["https://example.com/fruit", "closed"]


def test_run_suite_reports_query_failures(monkeypatch):
    class BrokenClient(FakeClient):
        def query_elements(self, session, strategy, selector):
            raise TransportError("browser went away")

    @contextmanager
    def fake_open_page(settings=None, url=None):
        yield object()

    monkeypatch.setattr(runner_mod, "open_page", fake_open_page)
    result = Runner(client=BrokenClient()).run_suite(make_suite())
    assert result["ok"] is False
    assert result["error_type"] == "TransportError"
    assert "browser went away" in result["error"]
