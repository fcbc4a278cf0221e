"""Import boundary rules: presentation -> domain <- data.

These rules see every file and decide from the importing file's layer
whether its imports may cross into another layer.
"""

from collections.abc import Iterator

from ..classifier import classify, layer_of, resolve_import
from ..config import Configuration
from ..models import ANY_ROLE, RawFinding, Role
from ..syntax import ImportDirective, SourceUnit
from .base import BaseRule

FLUTTER_UI_LIBRARIES = frozenset(
    {
        "package:flutter/material.dart",
        "package:flutter/widgets.dart",
        "package:flutter/cupertino.dart",
        "package:flutter_bloc/flutter_bloc.dart",
    }
)


def crossing_imports(
    unit: SourceUnit, config: Configuration, forbidden_layer: Role
) -> Iterator[tuple[ImportDirective, str]]:
    """Imports of ``unit`` whose target lies in ``forbidden_layer``"""
    for directive in unit.imports:
        target = resolve_import(directive.uri, unit.path, config.package_name)
        if target is None:
            continue
        if layer_of(classify(target, config)) == forbidden_layer:
            yield directive, target


class DomainNoDataImportsRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "domain_no_data_imports"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return ANY_ROLE

    @property
    def description(self) -> str:
        return "Domain layer should not import from the data layer."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        if layer_of(role) != Role.DOMAIN:
            return []
        return [
            self._create_finding(
                unit,
                directive.span,
                f"Domain file '{unit.path}' imports data layer file '{target}'.",
                correction="Use repository interfaces and entities instead of data layer implementations.",
            )
            for directive, target in crossing_imports(unit, config, Role.DATA)
        ]


class DomainNoPresentationImportsRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "domain_no_presentation_imports"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return ANY_ROLE

    @property
    def description(self) -> str:
        return "Domain layer should not import from the presentation layer or Flutter UI libraries."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        if layer_of(role) != Role.DOMAIN:
            return []

        findings = [
            self._create_finding(
                unit,
                directive.span,
                f"Domain file '{unit.path}' imports presentation layer file '{target}'.",
                correction="Remove presentation layer dependencies from domain code.",
            )
            for directive, target in crossing_imports(unit, config, Role.PRESENTATION)
        ]
        for directive in unit.imports:
            if directive.uri in FLUTTER_UI_LIBRARIES:
                findings.append(
                    self._create_finding(
                        unit,
                        directive.span,
                        f"Domain file '{unit.path}' imports UI library '{directive.uri}'.",
                        correction="Domain code must stay framework independent.",
                    )
                )
        return findings


class DataNoPresentationImportsRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "data_no_presentation_imports"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return ANY_ROLE

    @property
    def description(self) -> str:
        return "Data layer should not import from the presentation layer."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        if layer_of(role) != Role.DATA:
            return []
        return [
            self._create_finding(
                unit,
                directive.span,
                f"Data file '{unit.path}' imports presentation layer file '{target}'.",
                correction="Remove presentation layer dependencies from data layer code.",
            )
            for directive, target in crossing_imports(unit, config, Role.PRESENTATION)
        ]
