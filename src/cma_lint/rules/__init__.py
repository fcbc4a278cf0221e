from .base import BaseRule
from .bloc_rules import BlocInMultiProviderRule, BlocNamingConventionRule, CubitSimpleStateRule
from .di_rules import UseLazySingletonForBlocRule
from .entity_rules import (
    EntityNoCopyWithRule,
    EntityNoGettersRule,
    EntityNoMethodsRule,
    EntityNoSerializationRule,
    EntityNoStaticRule,
)
from .import_rules import DataNoPresentationImportsRule, DomainNoDataImportsRule, DomainNoPresentationImportsRule
from .model_rules import ModelExtendsEntityRule, ModelNamingConventionRule
from .repository_rules import (
    RepositoryImplImplementsInterfaceRule,
    RepositoryInterfaceReturnsEntityRule,
    RepositoryUsesAbstractInterfaceRule,
)

__all__ = [
    "BaseRule",
    "EntityNoMethodsRule",
    "EntityNoStaticRule",
    "EntityNoCopyWithRule",
    "EntityNoSerializationRule",
    "EntityNoGettersRule",
    "ModelExtendsEntityRule",
    "ModelNamingConventionRule",
    "RepositoryInterfaceReturnsEntityRule",
    "RepositoryUsesAbstractInterfaceRule",
    "RepositoryImplImplementsInterfaceRule",
    "DomainNoDataImportsRule",
    "DomainNoPresentationImportsRule",
    "DataNoPresentationImportsRule",
    "UseLazySingletonForBlocRule",
    "BlocNamingConventionRule",
    "CubitSimpleStateRule",
    "BlocInMultiProviderRule",
]
