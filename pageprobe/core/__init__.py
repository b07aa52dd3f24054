"""
Core package for pageprobe.
Lightweight package init to avoid import cycles.

Consumers should import submodules directly, e.g.:
  from pageprobe.core.page import Page
  from pageprobe.core.suite_loader import load_suites_file, CheckSuite
  from pageprobe.core.runner import Runner
"""

__all__: list[str] = []
