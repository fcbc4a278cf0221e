from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from .models import RawFinding, Severity, Span

PARSE_ERROR_ID = "parse_error"
RULE_FAULT_ID = "rule_fault"


class ParseError(Exception):
    """A source file could not be turned into a SourceUnit"""

    def __init__(self, file_path: str, message: str, line: int = 1):
        self.file_path = file_path
        self.line = line
        super().__init__(message)


class FaultKind(str, Enum):
    PARSE = "parse"
    RULE = "rule"


@dataclass(frozen=True)
class Fault:
    """A per-file or per-rule failure that degrades to a diagnostic.

    ``code`` names the failing rule for RULE faults and is None for PARSE.
    """

    kind: FaultKind
    file_path: str
    message: str
    code: str | None = None
    detail: Mapping[str, str] = field(default_factory=dict)
    span: Span = Span(line=1)

    def to_finding(self) -> RawFinding:
        if self.kind is FaultKind.PARSE:
            return RawFinding(
                rule_id=PARSE_ERROR_ID,
                file_path=self.file_path,
                span=self.span,
                message=f"Could not parse file: {self.message}",
                default_severity=Severity.INFO,
            )
        if self.kind is FaultKind.RULE:
            return RawFinding(
                rule_id=RULE_FAULT_ID,
                file_path=self.file_path,
                span=self.span,
                message=f"Rule '{self.code}' failed on this file: {self.message}",
                correction="Report this file to the linter maintainers.",
                default_severity=Severity.INFO,
            )
        raise ValueError(f"Unhandled fault kind: {self.kind}")


def parse_fault(file_path: str, message: str, line: int = 1) -> Fault:
    return Fault(kind=FaultKind.PARSE, file_path=file_path, message=message, span=Span(line=line))


def rule_fault(file_path: str, rule_id: str, exc: Exception) -> Fault:
    return Fault(
        kind=FaultKind.RULE,
        file_path=file_path,
        message=str(exc) or type(exc).__name__,
        code=rule_id,
        detail={"exception": type(exc).__name__},
    )
