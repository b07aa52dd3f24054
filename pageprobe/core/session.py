# pageprobe/core/session.py
from __future__ import annotations

"""Session access
----------------
The query-client interface the predicates are written against, and an
optional process-scoped "current session".

Predicates always receive their session explicitly. The ambient session
exists for test processes that drive a single browser: call
`set_current_session()` once during setup and `clear_current_session()` at
teardown (or wrap the block in `use_session()`), then build pages with
`Page.current(client)`. It is one value per process, not per thread.
"""

import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol, Sequence

from pageprobe.core.errors import NoSessionError
from pageprobe.core.models import ElementResult, Strategy


class QueryClient(Protocol):
    """Element lookups against a live browser session."""

    def query_elements(self, session: Any, strategy: Strategy, selector: str) -> Sequence[Any]:
        """Return every element matching the selector (possibly none).

        Raises only for transport/protocol failures.
        """

    def query_element(self, session: Any, strategy: Strategy, selector: str) -> ElementResult:
        """Return Found(first match) or Absent()."""

    def is_selected(self, element: Any) -> bool:
        """Whether a checkbox, radio or option is selected.

        Raises if the element is no longer attached to the page.
        """


_lock = threading.Lock()
_current: Optional[Any] = None


def current_session() -> Any:
    with _lock:
        session = _current
    if session is None:
        raise NoSessionError("No current browser session; call set_current_session() first")
    return session


def set_current_session(session: Any) -> None:
    global _current
    if session is None:
        raise ValueError("session cannot be None; use clear_current_session()")
    with _lock:
        _current = session


def clear_current_session() -> None:
    global _current
    with _lock:
        _current = None


@contextmanager
def use_session(session: Any) -> Iterator[Any]:
    """Make `session` current for the block, restoring the previous one after."""
    global _current
    with _lock:
        previous = _current
    set_current_session(session)
    try:
        yield session
    finally:
        with _lock:
            _current = previous
