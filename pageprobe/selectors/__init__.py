"""
Selectors package
-----------------
Escaping helpers for caller text and the semantic element finder that
turns a kind plus text into ordered candidate locators.
"""

from .escape import css_identifier, css_string, normalize_space, text_contains_xpath, xpath_literal
from .finder import Finder, LocatorKind

__all__ = [
    "css_identifier",
    "css_string",
    "normalize_space",
    "text_contains_xpath",
    "xpath_literal",
    "Finder",
    "LocatorKind",
]
