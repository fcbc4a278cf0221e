"""Entity purity rules.

Entities are plain data holders: final fields, a constructor and nothing
else. Behaviour, serialization and copying belong to the paired Model.
"""

import re

from ..config import Configuration
from ..models import RawFinding, Role
from ..syntax import ClassDecl, MemberDecl, MemberKind, SourceUnit, type_name
from .base import BaseRule

# Serialization heuristic: fromJson/toJson, fromMap/toMap, fromDocument/toDocument
SERIALIZATION_NAME = re.compile(r"^(from|to)(Json|Map|Document)$")

# Getters that only feed value equality
EQUALITY_GETTERS = frozenset({"hashCode", "props"})

ALLOWED_METHODS = frozenset({"toString"})


def entity_classes(unit: SourceUnit, config: Configuration) -> list[ClassDecl]:
    """Classes in an entity file that are not models misplaced there"""
    return [cls for cls in unit.classes if not cls.name.endswith(config.model_suffix)]


def is_copy_with(member: MemberDecl, cls: ClassDecl) -> bool:
    """Copy-with heuristic.

    Either the method is literally named ``copyWith``, or it returns the
    enclosing type and takes only optional named parameters, each of which
    names a field of the class.
    """
    if member.kind != MemberKind.METHOD:
        return False
    if member.name == "copyWith":
        return True
    if not member.return_type or type_name(member.return_type) != cls.name:
        return False
    if not member.parameters:
        return False
    fields = cls.field_names
    return all(p.is_optional_named and p.name in fields for p in member.parameters)


def is_serialization(member: MemberDecl) -> bool:
    if member.kind not in (MemberKind.METHOD, MemberKind.CONSTRUCTOR):
        return False
    return bool(SERIALIZATION_NAME.match(member.name))


def is_computed_getter(member: MemberDecl) -> bool:
    """A getter whose body does more than return a field"""
    if member.kind != MemberKind.GETTER or member.body is None:
        return False
    if member.name in EQUALITY_GETTERS:
        return False
    return not member.is_passthrough


class EntityNoMethodsRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "entity_no_methods"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.ENTITY})

    @property
    def description(self) -> str:
        return "Entities should not have methods other than constructors, operators and toString."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        findings = []
        for cls in entity_classes(unit, config):
            for member in cls.members_of(MemberKind.METHOD):
                if member.name in ALLOWED_METHODS:
                    continue
                findings.append(
                    self._create_finding(
                        unit,
                        member.span,
                        f"Entity '{cls.name}' declares method '{member.name}'. "
                        "Move this logic to a UseCase or Model.",
                        correction=f"Remove '{member.name}' or move it to {config.to_model_name(cls.name)}.",
                    )
                )
        return findings


class EntityNoStaticRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "entity_no_static"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.ENTITY})

    @property
    def description(self) -> str:
        return "Entities should not have static members."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        findings = []
        for cls in entity_classes(unit, config):
            for member in cls.members:
                if not member.is_static:
                    continue
                findings.append(
                    self._create_finding(
                        unit,
                        member.span,
                        f"Entity '{cls.name}' declares static member '{member.name}'.",
                        correction=f"Move '{member.name}' to {config.to_model_name(cls.name)}.",
                    )
                )
        return findings


class EntityNoCopyWithRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "entity_no_copywith"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.ENTITY})

    @property
    def description(self) -> str:
        return "Entities should not have copyWith methods; copying belongs to the Model."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        findings = []
        for cls in entity_classes(unit, config):
            for member in cls.members:
                if is_copy_with(member, cls):
                    findings.append(
                        self._create_finding(
                            unit,
                            member.span,
                            f"Entity '{cls.name}' declares copy method '{member.name}'. "
                            "Move copyWith to the Model class.",
                            correction=f"Add copyWith to {config.to_model_name(cls.name)} instead.",
                        )
                    )
        return findings


class EntityNoSerializationRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "entity_no_serialization"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.ENTITY})

    @property
    def description(self) -> str:
        return "Entities should not have fromJson/toJson style serialization members."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        findings = []
        for cls in entity_classes(unit, config):
            for member in cls.members:
                if not is_serialization(member):
                    continue
                findings.append(
                    self._create_finding(
                        unit,
                        member.span,
                        f"Entity '{cls.name}' declares serialization member '{member.name}'. "
                        "Move serialization to the Model class.",
                        correction=f"Move '{member.name}' to {config.to_model_name(cls.name)}.",
                    )
                )
        return findings


class EntityNoGettersRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "entity_no_getters"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.ENTITY})

    @property
    def description(self) -> str:
        return "Entities should not have computed getters."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        findings = []
        for cls in entity_classes(unit, config):
            for member in cls.members_of(MemberKind.GETTER):
                if is_computed_getter(member):
                    findings.append(
                        self._create_finding(
                            unit,
                            member.span,
                            f"Entity '{cls.name}' declares computed getter '{member.name}'. Move it to the Model.",
                            correction="Remove the getter or move it to the corresponding Model.",
                        )
                    )
        return findings
