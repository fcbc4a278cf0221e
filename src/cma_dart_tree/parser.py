import logging
import threading
from pathlib import Path

from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from cma_lint.faults import ParseError
from cma_lint.syntax import SourceUnit

from .ast_walker import ASTWalker
from .extractor import DeclarationExtractor
from .node_types import ERROR, ParseResult

logger = logging.getLogger(__name__)


class DartParser:
    """tree-sitter Dart parser producing SourceUnits for the linter.

    Files with local syntax errors are still extracted from the recovered
    tree; only unreadable files or trees with no recoverable structure raise
    ParseError.
    """

    def __init__(self):
        self._local = threading.local()
        self.extractor = DeclarationExtractor()

    @property
    def parser(self) -> Parser:
        # tree-sitter parsers are not shared between worker threads
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = get_parser("dart")
            self._local.parser = parser
        return parser

    def parse_string(self, source: str | bytes) -> ParseResult:
        data = source.encode("utf-8") if isinstance(source, str) else source
        tree = self.parser.parse(data)
        errors = [
            f"Syntax error at line {node.start_point[0] + 1}"
            for node in ASTWalker.find_all_by_type(tree.root_node, ERROR)
        ]
        return ParseResult(tree=tree, source=data, errors=errors)

    def parse_unit(self, source: str | bytes, file_path: str = "<string>") -> SourceUnit:
        result = self.parse_string(source)
        if result.tree.root_node.type == ERROR:
            raise ParseError(file_path, "no Dart declarations could be recovered")
        if result.errors:
            logger.debug("%s: %d syntax error(s), analyzing recovered tree", file_path, len(result.errors))
        return self.extractor.extract(file_path, result)

    def parse_file(self, file_path: Path) -> SourceUnit:
        path = Path(file_path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ParseError(str(path), f"cannot read file: {exc.strerror or exc}") from exc
        try:
            data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(str(path), "file is not valid UTF-8") from exc
        return self.parse_unit(data, str(path))
