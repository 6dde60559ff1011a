"""Minimal chat markup tree.

Command text may carry embedded elements, e.g. ``<img src="..."/>``, the
bracket shorthand ``[img src=...]`` or formatting tags. ``parse`` turns the
text into a tree of ``Text`` / ``Element`` nodes, ``render`` turns a tree back
into plain text, and ``NodeTransformer`` rewrites a tree in a single pass.
"""
from __future__ import annotations

import html
import re
from dataclasses import dataclass, field, replace
from typing import Dict, List, Tuple, Union


@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class Element:
    type: str
    attrs: Dict[str, str] = field(default_factory=dict)
    children: Tuple["Node", ...] = ()


Node = Union[Text, Element]

# Elements that never wrap content, closed or not
VOID_ELEMENTS = frozenset({"img", "br", "at", "face", "audio", "video", "file"})
ALIASES = {"image": "img"}

_TOKEN = re.compile(
    r"<(?P<close>/)?(?P<name>[A-Za-z][\w-]*)(?P<attrs>(?:\s[^<>]*?)?)\s*(?P<self>/)?>"
    r"|\[img(?P<battrs>\s[^\]]*)?\]",
    re.IGNORECASE,
)
_ATTR = re.compile(r"""([\w:-]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>\]]+)))?""")


def _parse_attrs(raw: str) -> Dict[str, str]:
    attrs: Dict[str, str] = {}
    for m in _ATTR.finditer(raw or ""):
        name, dq, sq, bare = m.groups()
        value = next((v for v in (dq, sq, bare) if v is not None), "")
        attrs[name.lower()] = html.unescape(value)
    return attrs


def parse(source: str) -> List[Node]:
    """Parse markup text into a list of top-level nodes.

    Unmatched closing tags are dropped, unclosed elements are closed at the
    end of input.
    """
    root: List[Node] = []
    # (name, attrs, children) for every open element; index 0 is the root
    stack: List[Tuple[str, Dict[str, str], List[Node]]] = [("", {}, root)]

    def close_top() -> None:
        name, attrs, children = stack.pop()
        stack[-1][2].append(Element(name, attrs, tuple(children)))

    pos = 0
    for m in _TOKEN.finditer(source or ""):
        if m.start() > pos:
            stack[-1][2].append(Text(html.unescape(source[pos:m.start()])))
        pos = m.end()

        if m.group(0).startswith("["):
            stack[-1][2].append(Element("img", _parse_attrs(m.group("battrs"))))
            continue

        name = m.group("name").lower()
        name = ALIASES.get(name, name)
        if m.group("close"):
            for depth in range(len(stack) - 1, 0, -1):
                if stack[depth][0] == name:
                    while len(stack) > depth:
                        close_top()
                    break
            continue

        attrs = _parse_attrs(m.group("attrs"))
        if m.group("self") or name in VOID_ELEMENTS:
            stack[-1][2].append(Element(name, attrs))
        else:
            stack.append((name, attrs, []))

    if pos < len(source or ""):
        stack[-1][2].append(Text(html.unescape(source[pos:])))
    while len(stack) > 1:
        close_top()
    return root


def render(nodes: List[Node]) -> str:
    """Render nodes to plain text, keeping only textual content."""
    parts: List[str] = []
    for node in nodes:
        match node:
            case Text(content=content):
                parts.append(content)
            case Element(type="br"):
                parts.append("\n")
            case Element(children=children):
                parts.append(render(list(children)))
    return "".join(parts)


class NodeTransformer:
    """Single-pass tree rewriter.

    Subclasses define ``visit_<element type>`` (or ``visit_text``) returning
    the list of nodes that replace the visited one. Elements without a handler
    are kept and their children transformed.
    """

    def transform(self, nodes: List[Node]) -> List[Node]:
        out: List[Node] = []
        for node in nodes:
            out.extend(self.visit(node))
        return out

    def visit(self, node: Node) -> List[Node]:
        match node:
            case Text():
                return self.visit_text(node)
            case Element(type=name):
                handler = getattr(self, "visit_" + name.replace("-", "_"), None)
                if handler is not None:
                    return handler(node)
                return [replace(node, children=tuple(self.transform(list(node.children))))]
        raise TypeError(f"unknown node: {node!r}")

    def visit_text(self, node: Text) -> List[Node]:
        return [node]
