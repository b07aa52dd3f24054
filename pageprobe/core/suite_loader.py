# pageprobe/core/suite_loader.py
from __future__ import annotations

"""Check suite schema and loader
--------------------------------
Defines the pydantic models for check suites and loads them from YAML,
including multi-document files and ${ENV} substitution.
"""

from enum import Enum
from pathlib import Path
from typing import Optional
import os
import re

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from pageprobe.core.errors import SuiteError
from pageprobe.core.models import Strategy


# ---------- Core enums ----------


class PredicateName(str, Enum):
    has_css = "has_css"
    has_no_css = "has_no_css"
    has_xpath = "has_xpath"
    has_no_xpath = "has_no_xpath"
    has_selector = "has_selector"
    has_no_selector = "has_no_selector"
    has_text = "has_text"
    has_no_text = "has_no_text"
    has_field = "has_field"
    has_no_field = "has_no_field"
    has_link = "has_link"
    has_no_link = "has_no_link"
    has_button = "has_button"
    has_no_button = "has_no_button"
    has_select = "has_select"
    has_no_select = "has_no_select"
    has_table = "has_table"
    has_no_table = "has_no_table"
    has_checked_field = "has_checked_field"
    has_no_checked_field = "has_no_checked_field"
    has_unchecked_field = "has_unchecked_field"
    has_no_unchecked_field = "has_no_unchecked_field"


STRATEGY_PREDICATES = {PredicateName.has_selector, PredicateName.has_no_selector}
COUNT_PREDICATES = {PredicateName.has_css, PredicateName.has_xpath, PredicateName.has_selector}


# ---------- Models ----------


class Check(BaseModel):
    predicate: PredicateName
    value: str = Field(..., description="Selector, text, id, name or label depending on predicate")
    strategy: Optional[Strategy] = Field(default=None, description="Only for has_selector / has_no_selector")
    count: Optional[int] = Field(default=None, ge=0)
    name: Optional[str] = Field(default=None, description="Human-friendly check label")

    @field_validator("strategy", mode="before")
    @classmethod
    def _parse_strategy(cls, v):
        if v is None:
            return v
        return Strategy.parse(v)

    @field_validator("value")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value cannot be empty")
        return v

    @model_validator(mode="after")
    def _check_arguments(self) -> "Check":
        if self.predicate in STRATEGY_PREDICATES and self.strategy is None:
            raise ValueError(f"{self.predicate.value} requires 'strategy'")
        if self.predicate not in STRATEGY_PREDICATES and self.strategy is not None:
            raise ValueError(f"'strategy' is not allowed for {self.predicate.value}")
        if self.count is not None and self.predicate not in COUNT_PREDICATES:
            raise ValueError(f"'count' is not allowed for {self.predicate.value}")
        return self

    @property
    def label(self) -> str:
        return self.name or f"{self.predicate.value} {self.value!r}"


class CheckSuite(BaseModel):
    version: str = Field(default="1")
    name: str = Field(..., description="Suite name, e.g., 'checkout'")
    url: str = Field(..., description="Absolute URL of the page under test")
    description: Optional[str] = None
    timeout_ms: Optional[int] = Field(default=None, ge=0, description="Overrides RETRY_TIMEOUT_MS")
    interval_ms: Optional[int] = Field(default=None, ge=1, description="Overrides RETRY_INTERVAL_MS")
    checks: list[Check] = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://", "file://")):
            raise ValueError("url must be an absolute http(s):// or file:// URL")
        return v


# ---------- Helpers ----------


def _subst_env(obj):
    if isinstance(obj, str):
        def repl(m):
            key = m.group(1)
            return os.environ.get(key, m.group(0))
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}", repl, obj)
    if isinstance(obj, list):
        return [_subst_env(x) for x in obj]
    if isinstance(obj, dict):
        return {k: _subst_env(v) for k, v in obj.items()}
    return obj


def _validation_message(ve: ValidationError, header: str) -> str:
    lines = [header]
    for e in ve.errors():
        loc = ".".join(str(p) for p in e.get("loc", []))
        msg = e.get("msg", "invalid value")
        lines.append(f"  - {loc or '<suite>'}: {msg}")
    return "\n".join(lines)


# ---------- Public API ----------


def load_suites_file(path: Path | str) -> list[CheckSuite]:
    """Load one or more suites from a YAML file (supports multi-document)."""
    suite_path = Path(path)
    if not suite_path.exists():
        raise FileNotFoundError(f"Suite file not found: {suite_path}")
    try:
        docs = list(yaml.safe_load_all(suite_path.read_text(encoding="utf-8")))
    except yaml.YAMLError as ye:
        raise SuiteError(f"YAML parse error in {suite_path}: {ye}") from ye

    out: list[CheckSuite] = []
    for idx, data in enumerate(docs, start=1):
        if data is None:
            continue
        if not isinstance(data, dict):
            raise SuiteError(f"Document {idx} in {suite_path} must be a mapping/object.")
        try:
            out.append(CheckSuite.model_validate(_subst_env(data)))
        except ValidationError as ve:
            raise SuiteError(_validation_message(ve, f"Invalid suite '{suite_path}' (document {idx}):")) from ve
    if not out:
        raise SuiteError(f"No suite documents found in {suite_path}")
    return out


def load_suite(path: Path | str) -> CheckSuite:
    """Load a single-document suite file."""
    suites = load_suites_file(path)
    if len(suites) != 1:
        raise SuiteError(f"{path} holds {len(suites)} suites; use load_suites_file()")
    return suites[0]


def find_suite_files(root: Path, recursive: bool = True) -> list[Path]:
    if recursive:
        return sorted(list(root.rglob("*.yaml")) + list(root.rglob("*.yml")))
    return sorted(list(root.glob("*.yaml")) + list(root.glob("*.yml")))


__all__ = [
    "PredicateName",
    "Check",
    "CheckSuite",
    "load_suite",
    "load_suites_file",
    "find_suite_files",
]
