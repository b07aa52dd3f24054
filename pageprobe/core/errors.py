"""Exception types raised by pageprobe.

Running out of retry budget is never an error: predicates just return False.
Everything here is a caller mistake or a missing precondition, and is
raised before (or instead of) polling.
"""


class PageProbeError(Exception):
    """Base exception for pageprobe."""


class NoSessionError(PageProbeError):
    """No ambient browser session has been set."""


class UnknownStrategyError(PageProbeError, ValueError):
    """Lookup strategy is not one of the recognised values."""


class UnknownLocatorKindError(PageProbeError, ValueError):
    """Semantic locator kind is not one the finder knows."""


class InvalidSelectorError(PageProbeError, ValueError):
    """Selector cannot be expressed safely for its strategy."""


class SuiteError(PageProbeError, ValueError):
    """Check suite file is not valid YAML or does not match the schema."""
