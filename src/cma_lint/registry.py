from collections.abc import Iterable

from .config import Configuration
from .models import Role
from .rules.base import BaseRule


class RuleRegistry:
    """Registry for managing the rules a LinterEngine runs"""

    def __init__(self, rules: Iterable[BaseRule] | None = None, load_builtins: bool = True):
        self._rules: list[BaseRule] = []
        if rules is not None:
            for rule in rules:
                self.register(rule)
        elif load_builtins:
            self._load_builtin_rules()

    def register(self, rule: BaseRule):
        if any(existing.rule_id == rule.rule_id for existing in self._rules):
            raise ValueError(f"Rule '{rule.rule_id}' is already registered")
        self._rules.append(rule)

    def get_all_rules(self) -> list[BaseRule]:
        return list(self._rules)

    def get_rule(self, rule_id: str) -> BaseRule | None:
        for rule in self._rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    def rules_for(self, role: Role, config: Configuration) -> list[BaseRule]:
        """Rules that inspect files of ``role`` under ``config``"""
        return [rule for rule in self._rules if role in rule.applicable_roles and rule.is_active(config)]

    def _load_builtin_rules(self):
        from .rules import (
            BlocInMultiProviderRule,
            BlocNamingConventionRule,
            CubitSimpleStateRule,
            DataNoPresentationImportsRule,
            DomainNoDataImportsRule,
            DomainNoPresentationImportsRule,
            EntityNoCopyWithRule,
            EntityNoGettersRule,
            EntityNoMethodsRule,
            EntityNoSerializationRule,
            EntityNoStaticRule,
            ModelExtendsEntityRule,
            ModelNamingConventionRule,
            RepositoryImplImplementsInterfaceRule,
            RepositoryInterfaceReturnsEntityRule,
            RepositoryUsesAbstractInterfaceRule,
            UseLazySingletonForBlocRule,
        )

        self.register(EntityNoMethodsRule())
        self.register(EntityNoCopyWithRule())
        self.register(EntityNoStaticRule())
        self.register(EntityNoSerializationRule())
        self.register(EntityNoGettersRule())
        self.register(ModelExtendsEntityRule())
        self.register(ModelNamingConventionRule())
        self.register(RepositoryInterfaceReturnsEntityRule())
        self.register(RepositoryUsesAbstractInterfaceRule())
        self.register(RepositoryImplImplementsInterfaceRule())
        self.register(DomainNoDataImportsRule())
        self.register(DomainNoPresentationImportsRule())
        self.register(DataNoPresentationImportsRule())
        self.register(UseLazySingletonForBlocRule())
        self.register(BlocNamingConventionRule())
        self.register(CubitSimpleStateRule())
        self.register(BlocInMultiProviderRule())
