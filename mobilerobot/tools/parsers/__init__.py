"""Parsers for raw device output."""

from .uiautomator_parser import (
    UiTreeNode,
    extract_xml,
    flatten_elements,
    parse_bounds,
    parse_hierarchy,
)

__all__ = [
    "UiTreeNode",
    "extract_xml",
    "flatten_elements",
    "parse_bounds",
    "parse_hierarchy",
]
