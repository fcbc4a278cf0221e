from .ast_walker import ASTWalker
from .extractor import DeclarationExtractor
from .node_types import ParseResult
from .parser import DartParser

__all__ = ["ASTWalker", "DartParser", "DeclarationExtractor", "ParseResult"]
