from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    """Blocking strength of a rule violation"""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    IGNORE = "ignore"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    Severity.IGNORE: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
}


class Role(str, Enum):
    """Architectural role of a source file"""

    ENTITY = "entity"
    MODEL = "model"
    DOMAIN = "domain"
    DATA = "data"
    PRESENTATION = "presentation"
    GLOBAL_STATE_CONTAINER = "global_state_container"
    OTHER = "other"


# Wildcard for rules that must see every file regardless of its own role
ANY_ROLE: frozenset[Role] = frozenset(Role)


@dataclass(frozen=True)
class Span:
    """1-based source location range"""

    line: int
    column: int = 1
    end_line: int | None = None
    end_column: int | None = None


@dataclass(frozen=True)
class RawFinding:
    """A rule violation before severity resolution"""

    rule_id: str
    file_path: str
    span: Span
    message: str
    correction: str | None = None
    default_severity: Severity = Severity.ERROR


@dataclass(frozen=True)
class Diagnostic:
    """A finding with its resolved severity"""

    rule_id: str
    file_path: str
    span: Span
    message: str
    severity: Severity
    correction: str | None = None

    @property
    def line(self) -> int:
        return self.span.line

    @property
    def column(self) -> int:
        return self.span.column
