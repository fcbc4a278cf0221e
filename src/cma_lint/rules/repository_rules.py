import re

from ..classifier import normalize_path
from ..config import Configuration
from ..models import RawFinding, Role
from ..syntax import MemberKind, SourceUnit
from .base import BaseRule

IMPL_SUFFIX = "Impl"


def is_repository_interface_file(path: str) -> bool:
    normalized = normalize_path(path)
    return "/domain/repositories/" in normalized or (
        "/domain/" in normalized and normalized.endswith("_repository.dart")
    )


def is_repository_impl_file(path: str) -> bool:
    return "/data/repositories/" in normalize_path(path)


class RepositoryInterfaceReturnsEntityRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "repository_interface_returns_entity"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.DOMAIN})

    @property
    def description(self) -> str:
        return "Repository interfaces should return Entity types, not Models."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        if not is_repository_interface_file(unit.path):
            return []

        model_type = re.compile(rf"\b\w+{re.escape(config.model_suffix)}\b")
        findings = []
        for cls in unit.classes:
            if not cls.is_abstract:
                continue
            for member in cls.members_of(MemberKind.METHOD, MemberKind.GETTER):
                if not member.return_type:
                    continue
                for model in model_type.findall(member.return_type):
                    entity = config.paired_entity_name(model)
                    findings.append(
                        self._create_finding(
                            unit,
                            member.span,
                            f"'{cls.name}.{member.name}' returns Model type '{model}'; "
                            f"repository interfaces should return the Entity '{entity}'.",
                            correction=f"Change return type from {model} to {entity}.",
                        )
                    )
        return findings


class RepositoryUsesAbstractInterfaceRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "repository_uses_abstract_interface"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.DOMAIN})

    @property
    def description(self) -> str:
        return 'Repository interfaces should be declared as "abstract interface class".'

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        if not is_repository_interface_file(unit.path):
            return []

        findings = []
        for cls in unit.classes:
            if not cls.name.endswith(config.repository_suffix) or not cls.is_abstract:
                continue
            if "interface" in cls.modifiers:
                continue
            findings.append(
                self._create_finding(
                    unit,
                    cls.span,
                    f"Repository '{cls.name}' should be declared as \"abstract interface class\".",
                    correction='Add "interface" keyword after "abstract".',
                )
            )
        return findings


class RepositoryImplImplementsInterfaceRule(BaseRule):
    """``UserRepositoryImpl`` in data/repositories must implement ``UserRepository``"""

    @property
    def rule_id(self) -> str:
        return "repository_impl_implements_interface"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.DATA})

    @property
    def description(self) -> str:
        return "Repository implementations should implement their domain interface."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        if not is_repository_impl_file(unit.path):
            return []

        findings = []
        impl_suffix = config.repository_suffix + IMPL_SUFFIX
        for cls in unit.classes:
            if not cls.name.endswith(impl_suffix):
                continue
            interface = cls.name[: -len(IMPL_SUFFIX)]
            if interface in cls.interface_names or interface == cls.superclass_name:
                continue
            findings.append(
                self._create_finding(
                    unit,
                    cls.span,
                    f"Repository implementation '{cls.name}' does not implement '{interface}'.",
                    correction=f'Add "implements {interface}" to this class.',
                )
            )
        return findings
