"""
Syntax tree construction for LaTeX documents
"""

import regex
import logging
import weakref
from typing import Any, Callable, Dict, Iterator, List, Optional
from enum import Enum

import lxml.etree as ET

from .models import DocumentStatistics


logger = logging.getLogger(__name__)


class NodeType(Enum):
    COMMAND = "command"
    ENVIRONMENT = "environment"
    MATH = "math"
    TEXT = "text"
    COMMENT = "comment"


class ASTNode:
    """A node of the document tree.

    Children are owned by the ``children`` list. The parent link is a weak
    reference used for upward traversal only.
    """

    __slots__ = ['type', 'value', 'children', '_parent', '__weakref__']

    def __init__(self, type: NodeType, value: str = '', children: Optional[List['ASTNode']] = None):
        self.type = type
        self.value = value
        self.children: List['ASTNode'] = []
        self._parent = None
        for child in children or []:
            self.append(child)

    def __repr__(self):
        return f"ASTNode({self.type.value}, {self.value!r}, children={len(self.children)})"

    @property
    def parent(self) -> Optional['ASTNode']:
        return self._parent() if self._parent is not None else None

    def append(self, child: 'ASTNode') -> 'ASTNode':
        """Attach a child node and return it."""
        child._parent = weakref.ref(self)
        self.children.append(child)
        return child

    def iter_nodes(self) -> Iterator['ASTNode']:
        """Iterate over this node and its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def depth(self) -> int:
        """Number of ancestors between this node and the root."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to nested dictionaries."""
        root = {'type': self.type.value, 'value': self.value, 'children': []}
        stack = [(self, root)]
        while stack:
            node, data = stack.pop()
            for child in node.children:
                child_data = {'type': child.type.value, 'value': child.value, 'children': []}
                data['children'].append(child_data)
                stack.append((child, child_data))
        return root

    def to_element(self) -> ET.Element:
        """Convert the subtree to an lxml Element."""
        root = ET.Element(self.type.value, value=self.value)
        stack = [(self, root)]
        while stack:
            node, elem = stack.pop()
            for child in node.children:
                child_elem = ET.SubElement(elem, child.type.value, value=child.value)
                stack.append((child, child_elem))
        return root

    def to_xml(self, pretty_print: bool = True) -> str:
        """Convert the subtree to an XML string."""
        return ET.tostring(self.to_element(), pretty_print=pretty_print, encoding='unicode')


class TreeBuilder:
    """Builds an ASTNode tree in one left-to-right pass.

    The builder is lenient: an ``\\end`` that does not close the current
    environment is dropped, and nothing it sees is reported. Use the
    checkers for structural errors.
    """

    BEGIN_PREFIX = '\\begin{'
    END_PREFIX = '\\end{'

    def __init__(self):
        self.command_name_pattern = regex.compile(r'[a-zA-Z@]*')

    def build(self, text: str) -> ASTNode:
        """Build the syntax tree of a document.

        Args:
            text: Full document text

        Returns:
            Synthetic root node (a text node with an empty value)
        """
        root = ASTNode(NodeType.TEXT, '')
        current = root
        i = 0
        length = len(text)

        while i < length:
            if text.startswith(self.BEGIN_PREFIX, i):
                close = text.find('}', i + len(self.BEGIN_PREFIX))
                if close != -1:
                    env_name = text[i + len(self.BEGIN_PREFIX):close]
                    current = current.append(ASTNode(NodeType.ENVIRONMENT, env_name))
                    i = close + 1
                    continue

            if text.startswith(self.END_PREFIX, i):
                close = text.find('}', i + len(self.END_PREFIX))
                if close != -1:
                    env_name = text[i + len(self.END_PREFIX):close]
                    if current.type is NodeType.ENVIRONMENT and current.value == env_name:
                        current = current.parent or root
                    i = close + 1
                    continue

            char = text[i]

            if char == '\\':
                match = self.command_name_pattern.match(text, i + 1)
                current = current.append(ASTNode(NodeType.COMMAND, match.group()))
                i = match.end()
            elif char == '{':
                i += 1
            elif char == '}':
                current = current.parent or root
                i += 1
            elif char == '$':
                current = current.append(ASTNode(NodeType.MATH, '$'))
                i += 1
            elif char == '%':
                # A comment runs to the end of the document here, not the line.
                current.append(ASTNode(NodeType.COMMENT, text[i:]))
                break
            else:
                current.append(ASTNode(NodeType.TEXT, char))
                i += 1

        logger.debug(f"Built syntax tree with {len(root.children)} top-level node(s)")
        return root


def build_tree(text: str) -> ASTNode:
    """Build the syntax tree of a document."""
    return TreeBuilder().build(text)


def traverse(node: ASTNode, callback: Callable[[ASTNode], Any]):
    """Call ``callback`` on every node of the subtree in pre-order."""
    for child in node.iter_nodes():
        callback(child)


def visualize(node: ASTNode) -> str:
    """Render the subtree as an indented ``type: value`` listing."""
    lines = []
    stack = [(node, 0)]
    while stack:
        current, level = stack.pop()
        lines.append(f"{'  ' * level}{current.type.value}: {current.value}")
        stack.extend((child, level + 1) for child in reversed(current.children))
    return '\n'.join(lines) + '\n'


def calculate_tree_depth(node: ASTNode) -> int:
    """Calculate maximum depth of tree (the root alone has depth 0)."""
    max_depth = 0
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        max_depth = max(max_depth, depth)
        stack.extend((child, depth + 1) for child in current.children)
    return max_depth


def collect_statistics(tree: Optional[ASTNode], text: str) -> DocumentStatistics:
    """Count node kinds and nesting depth of a document tree."""
    stats = DocumentStatistics(total_lines=len(text.split('\n')))
    if tree is None:
        return stats

    counters = {
        NodeType.COMMAND: 'total_commands',
        NodeType.MATH: 'total_math_expressions',
        NodeType.ENVIRONMENT: 'total_environments',
        NodeType.COMMENT: 'total_comments',
    }

    def count(node: ASTNode):
        attr = counters.get(node.type)
        if attr:
            setattr(stats, attr, getattr(stats, attr) + 1)

    traverse(tree, count)
    stats.max_nesting_depth = calculate_tree_depth(tree)
    return stats


__all__ = [
    'ASTNode',
    'NodeType',
    'TreeBuilder',
    'build_tree',
    'traverse',
    'visualize',
    'calculate_tree_depth',
    'collect_statistics'
]
