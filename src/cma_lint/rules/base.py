from abc import ABC, abstractmethod

from ..config import Configuration
from ..models import RawFinding, Role, Span
from ..syntax import SourceUnit


class BaseRule(ABC):
    """Abstract base class for all architecture rules."""

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique rule identifier (e.g., 'entity_no_methods')."""
        pass

    @property
    @abstractmethod
    def applicable_roles(self) -> frozenset[Role]:
        """Roles of files this rule inspects. ANY_ROLE for every file."""
        pass

    @property
    def description(self) -> str:
        """Detailed description of what this rule checks."""
        return ""

    def is_active(self, config: Configuration) -> bool:
        """Whether the configured styles make this rule meaningful."""
        return True

    @abstractmethod
    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        """Inspect one file and return its violations."""
        pass

    # Helper method for consistent finding creation
    def _create_finding(
        self,
        unit: SourceUnit,
        span: Span,
        message: str,
        correction: str | None = None,
    ) -> RawFinding:
        return RawFinding(
            rule_id=self.rule_id,
            file_path=unit.path,
            span=span,
            message=message,
            correction=correction,
        )
