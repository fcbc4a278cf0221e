from ..config import Configuration
from ..models import RawFinding, Role
from ..syntax import SourceUnit
from .base import BaseRule


class ModelExtendsEntityRule(BaseRule):
    """Models must extend (or implement) the entity they carry.

    ``UserModel`` must extend ``User``. A class without the model suffix has no
    derivable entity name, so it only has to have some supertype besides Object.
    """

    @property
    def rule_id(self) -> str:
        return "model_extends_entity"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.MODEL})

    @property
    def description(self) -> str:
        return "Model classes should extend their corresponding Entity."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        findings = []
        for cls in unit.classes:
            if cls.is_private:
                continue

            supertypes = {cls.superclass_name, *cls.interface_names} - {None, "Object"}

            if cls.name.endswith(config.model_suffix):
                entity = config.paired_entity_name(cls.name)
                if entity in supertypes:
                    continue
                message = f"Model '{cls.name}' should extend its entity '{entity}'."
                correction = f'Add "extends {entity}" to this model class.'
            else:
                if supertypes:
                    continue
                message = f"Model '{cls.name}' does not extend an entity."
                correction = 'Add "extends EntityName" to this model class.'

            findings.append(self._create_finding(unit, cls.span, message, correction=correction))
        return findings


class ModelNamingConventionRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "model_naming_convention"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.MODEL})

    @property
    def description(self) -> str:
        return "Classes in the models directory should end with the model suffix."

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        findings = []
        for cls in unit.classes:
            if cls.is_private or cls.name.endswith(config.model_suffix):
                continue
            findings.append(
                self._create_finding(
                    unit,
                    cls.span,
                    f"Model class '{cls.name}' should be named with the \"{config.model_suffix}\" suffix.",
                    correction=f"Rename this class to {config.to_model_name(cls.name)}.",
                )
            )
        return findings
