"""
UIAutomator XML Parser - turns ``uiautomator dump`` output into screen elements.

Input XML format:
<hierarchy rotation="0">
    <node index="0" text="" resource-id="" class="android.widget.FrameLayout"
          package="com.android.launcher3" content-desc="" focused="false"
          bounds="[0,0][1080,2400]">
        <node ...>...</node>
    </node>
</hierarchy>
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import List, Optional

from mobilerobot.models import ScreenElement, ScreenElementRect
from mobilerobot.tools.driver.base import ActionableError

logger = logging.getLogger("mobilerobot")

# Bounds parsing regex: "[left,top][right,bottom]"
BOUNDS_PATTERN = re.compile(r"^\[(\d+),(\d+)\]\[(\d+),(\d+)\]$")

XML_DECLARATION = "<?xml"
HIERARCHY_END = "</hierarchy>"


@dataclass
class UiTreeNode:
    """One ``<node>`` of the dump, attributes kept as raw strings."""

    children: List["UiTreeNode"] = field(default_factory=list)
    class_name: Optional[str] = None
    text: Optional[str] = None
    bounds: Optional[str] = None
    hint: Optional[str] = None
    focused: Optional[str] = None
    content_desc: Optional[str] = None
    resource_id: Optional[str] = None

    @classmethod
    def from_element(cls, element: ET.Element) -> "UiTreeNode":
        return cls(
            class_name=element.get("class"),
            text=element.get("text"),
            bounds=element.get("bounds"),
            hint=element.get("hint"),
            focused=element.get("focused"),
            content_desc=element.get("content-desc"),
            resource_id=element.get("resource-id"),
        )


def extract_xml(dump: str) -> str:
    """Strip whatever uiautomator printed around the XML document."""
    start = dump.find(XML_DECLARATION)
    if start > 0:
        dump = dump[start:]
    end = dump.rfind(HIERARCHY_END)
    if end != -1:
        dump = dump[: end + len(HIERARCHY_END)]
    return dump


def parse_hierarchy(xml_content: str) -> Optional[UiTreeNode]:
    """Parse a dump into a tree of ``UiTreeNode``.

    Several top-level nodes are wrapped in an attribute-less virtual root.
    Returns None when the hierarchy holds no node at all.

    Raises:
        ActionableError: the XML is malformed
    """
    try:
        root = ET.fromstring(xml_content.strip())
    except ET.ParseError as e:
        raise ActionableError(f"Failed to parse UIAutomator XML: {e}") from e

    if root.tag == "node":
        tree = UiTreeNode.from_element(root)
    else:
        top_level = root.findall("node")
        if not top_level:
            return None
        if len(top_level) == 1:
            root = top_level[0]
            tree = UiTreeNode.from_element(root)
        else:
            tree = UiTreeNode()

    # explicit stack: dumps of deep layouts must not hit the recursion limit
    stack = [(root, tree)]
    while stack:
        element, node = stack.pop()
        for child_element in element:
            if child_element.tag != "node":
                continue
            child = UiTreeNode.from_element(child_element)
            node.children.append(child)
            stack.append((child_element, child))
    return tree


def parse_bounds(bounds: Optional[str]) -> Optional[ScreenElementRect]:
    """``"[10,20][110,220]"`` → ``ScreenElementRect(x=10, y=20, width=100, height=200)``."""
    match = BOUNDS_PATTERN.match(bounds or "")
    if not match:
        return None
    left, top, right, bottom = (int(v) for v in match.groups())
    return ScreenElementRect(x=left, y=top, width=right - left, height=bottom - top)


def to_screen_element(node: UiTreeNode) -> Optional[ScreenElement]:
    """Element for *node*, or None when it carries nothing or has no area."""
    if not (node.text or node.content_desc or node.hint):
        return None

    rect = parse_bounds(node.bounds)
    if rect is None or rect.width <= 0 or rect.height <= 0:
        return None

    element = ScreenElement(
        type=node.class_name or "text",
        text=node.text,
        label=node.content_desc or node.hint or "",
        rect=rect,
    )
    # only report focus when certain, absent otherwise
    if node.focused == "true":
        element.focused = True
    if node.resource_id:
        element.identifier = node.resource_id
    return element


def flatten_elements(root: Optional[UiTreeNode]) -> List[ScreenElement]:
    """Collect elements depth first, each node after all of its descendants."""
    if root is None:
        return []

    elements: List[ScreenElement] = []
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            element = to_screen_element(node)
            if element is not None:
                elements.append(element)
            continue
        stack.append((node, True))
        for child in reversed(node.children):
            stack.append((child, False))
    return elements
