from typing import Callable, List, Optional

from tree_sitter import Node

from cma_lint.models import Span


class ASTWalker:
    """Utilities for traversing and searching the Dart AST"""

    @staticmethod
    def walk(node: Node, callback: Callable[[Node], None]):
        """Perform a pre-order depth-first traversal of the AST.

        Uses an explicit stack: long expression chains nest deeper than the
        interpreter's recursion limit.
        """
        stack = [node]
        while stack:
            current = stack.pop()
            callback(current)
            stack.extend(reversed(current.children))

    @staticmethod
    def find_parent_of_type(node: Node, *type_names: str) -> Optional[Node]:
        """Find the first ancestor whose type is one of type_names"""
        current = node.parent
        while current:
            if current.type in type_names:
                return current
            current = current.parent
        return None

    @staticmethod
    def get_child_of_type(node: Node, *type_names: str) -> Optional[Node]:
        """Find the first direct child whose type is one of type_names"""
        for child in node.children:
            if child.type in type_names:
                return child
        return None

    @staticmethod
    def find_all_by_type(node: Node, *type_names: str) -> List[Node]:
        """Find all descendant nodes whose type is one of type_names"""
        results = []

        def check(n):
            if n.type in type_names:
                results.append(n)

        ASTWalker.walk(node, check)
        return results

    @staticmethod
    def get_text(node: Node, source: bytes) -> str:
        return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def text_between(source: bytes, start: int, end: int) -> str:
        return source[start:end].decode("utf-8", errors="replace")

    @staticmethod
    def span_of(node: Node) -> Span:
        return Span(
            line=node.start_point[0] + 1,
            column=node.start_point[1] + 1,
            end_line=node.end_point[0] + 1,
            end_column=node.end_point[1] + 1,
        )
