import logging
from pathlib import Path

import pytest

from cma_lint.config import Configuration
from cma_lint.engine import LinterEngine
from cma_lint.faults import Fault, FaultKind, ParseError, parse_fault, rule_fault
from cma_lint.models import ANY_ROLE, Role, Severity
from cma_lint.registry import RuleRegistry
from cma_lint.rules import EntityNoMethodsRule, EntityNoStaticRule, ModelNamingConventionRule
from cma_lint.rules.base import BaseRule
from factories import ENTITY_PATH, MODEL_PATH, field, klass, method, plain_entity, unit


class ExplodingRule(BaseRule):
    @property
    def rule_id(self):
        return "exploding"

    @property
    def applicable_roles(self):
        return ANY_ROLE

    def check(self, unit, role, config):
        raise RuntimeError("boom")


class FakeParser:
    """Serves prepared units by file name; names in ``broken`` fail to parse"""

    def __init__(self, units, broken=(), crashing=()):
        self.units = {u.path: u for u in units}
        self.broken = set(broken)
        self.crashing = set(crashing)

    def parse_file(self, file_path):
        path = str(file_path)
        if path in self.broken:
            raise ParseError(path, "unexpected token", line=4)
        if path in self.crashing:
            raise RecursionError("maximum recursion depth exceeded")
        return self.units[path]


def dirty_entity_unit():
    user = klass("User", [field("id"), method("validate", line=6), field("empty", line=8, static=True)])
    return unit(ENTITY_PATH, [user])


def test_registry_loads_all_builtin_rules():
    rule_ids = [rule.rule_id for rule in RuleRegistry().get_all_rules()]
    assert len(rule_ids) == 17
    assert len(set(rule_ids)) == 17
    assert "domain_no_data_imports" in rule_ids


def test_registry_rejects_duplicate_ids():
    registry = RuleRegistry(rules=[EntityNoMethodsRule()])
    with pytest.raises(ValueError):
        registry.register(EntityNoMethodsRule())


def test_registry_rules_for_role():
    registry = RuleRegistry(rules=[EntityNoMethodsRule(), ModelNamingConventionRule(), ExplodingRule()])
    config = Configuration.defaults()
    assert [r.rule_id for r in registry.rules_for(Role.ENTITY, config)] == ["entity_no_methods", "exploding"]
    assert registry.get_rule("exploding") is not None
    assert registry.get_rule("missing") is None


def test_analyze_reports_entity_violations():
    engine = LinterEngine(registry=RuleRegistry(rules=[EntityNoMethodsRule(), EntityNoStaticRule()]), jobs=1)
    diagnostics = engine.analyze([dirty_entity_unit()])

    assert [(d.rule_id, d.line) for d in diagnostics] == [("entity_no_methods", 6), ("entity_no_static", 8)]
    assert all(d.severity == Severity.ERROR for d in diagnostics)


def test_rules_only_run_on_matching_roles():
    engine = LinterEngine(registry=RuleRegistry(rules=[ModelNamingConventionRule()]), jobs=1)
    assert engine.analyze([dirty_entity_unit()]) == []
    assert len(engine.analyze([unit(MODEL_PATH, [klass("UserDto", superclass="User")])])) == 1


def test_rule_failure_becomes_info_diagnostic(caplog):
    engine = LinterEngine(registry=RuleRegistry(rules=[ExplodingRule(), EntityNoMethodsRule()]), jobs=1)
    with caplog.at_level(logging.WARNING, logger="cma_lint.engine"):
        diagnostics = engine.analyze([dirty_entity_unit()])

    fault = [d for d in diagnostics if d.rule_id == "rule_fault"]
    assert len(fault) == 1
    assert fault[0].severity == Severity.INFO
    assert "exploding" in fault[0].message
    assert "boom" in fault[0].message
    # the other rule still ran on the same file
    assert any(d.rule_id == "entity_no_methods" for d in diagnostics)
    assert "exploding" in caplog.text


def test_rule_fault_severity_can_be_overridden():
    config = Configuration(severity_overrides={"rule_fault": "ignore"})
    engine = LinterEngine(config=config, registry=RuleRegistry(rules=[ExplodingRule()]), jobs=1)
    assert engine.analyze([dirty_entity_unit()]) == []


def test_parse_error_becomes_info_diagnostic():
    good = dirty_entity_unit()
    broken = "lib/features/auth/domain/entities/broken.dart"
    engine = LinterEngine(
        registry=RuleRegistry(rules=[EntityNoMethodsRule()]),
        parser=FakeParser([good], broken=[broken]),
        jobs=2,
    )
    diagnostics = engine.analyze_files([Path(broken), Path(ENTITY_PATH)])

    parse_errors = [d for d in diagnostics if d.rule_id == "parse_error"]
    assert len(parse_errors) == 1
    assert parse_errors[0].severity == Severity.INFO
    assert parse_errors[0].line == 4
    assert "unexpected token" in parse_errors[0].message
    assert any(d.rule_id == "entity_no_methods" for d in diagnostics)


@pytest.mark.parametrize("jobs", [1, 2])
def test_extraction_crash_is_contained_to_its_file(jobs, caplog):
    good = dirty_entity_unit()
    crashing = "lib/features/auth/domain/entities/deep.dart"
    engine = LinterEngine(
        registry=RuleRegistry(rules=[EntityNoMethodsRule()]),
        parser=FakeParser([good], crashing=[crashing]),
        jobs=jobs,
    )
    with caplog.at_level(logging.WARNING, logger="cma_lint.engine"):
        diagnostics = engine.analyze_files([Path(crashing), Path(ENTITY_PATH)])

    assert [(d.file_path, d.rule_id) for d in diagnostics] == [
        (crashing, "parse_error"),
        (ENTITY_PATH, "entity_no_methods"),
    ]
    assert diagnostics[0].severity == Severity.INFO
    assert "RecursionError" in diagnostics[0].message
    assert "deep.dart" in caplog.text


def test_output_is_independent_of_registration_and_submission_order():
    units = [
        dirty_entity_unit(),
        unit("lib/features/shop/domain/entities/cart.dart", [klass("Cart", [method("total", line=3)])]),
        unit(ENTITY_PATH.replace("user", "account"), [plain_entity("Account")]),
    ]
    first = LinterEngine(registry=RuleRegistry(rules=[EntityNoMethodsRule(), EntityNoStaticRule()]), jobs=4)
    second = LinterEngine(registry=RuleRegistry(rules=[EntityNoStaticRule(), EntityNoMethodsRule()]), jobs=1)

    assert first.analyze(units) == second.analyze(list(reversed(units)))


def test_disabled_linting_reports_nothing():
    engine = LinterEngine(config=Configuration(lint_enabled=False), jobs=1)
    assert engine.analyze([dirty_entity_unit()]) == []


def test_fault_variants_convert_to_findings():
    parse = parse_fault("lib/a.dart", "bad syntax", line=3).to_finding()
    assert parse.rule_id == "parse_error"
    assert parse.span.line == 3
    assert parse.default_severity == Severity.INFO

    rule = rule_fault("lib/a.dart", "entity_no_methods", KeyError("x")).to_finding()
    assert rule.rule_id == "rule_fault"
    assert "entity_no_methods" in rule.message
    assert rule.default_severity == Severity.INFO


def test_fault_carries_exception_type():
    fault = rule_fault("lib/a.dart", "some_rule", ValueError())
    assert fault.kind is FaultKind.RULE
    assert fault.message == "ValueError"
    assert fault.detail == {"exception": "ValueError"}
    assert isinstance(fault, Fault)
