import re

from ..config import Configuration, DiStyle
from ..models import ANY_ROLE, RawFinding, Role
from ..syntax import ClassDecl, SourceUnit, type_name
from .base import BaseRule

# get_it registrations that build a new instance on every lookup
PER_CALL_REGISTRATIONS = frozenset({"registerFactory", "registerFactoryParam", "registerFactoryAsync"})

# injectable annotations that mean "new instance per injection"
PER_CALL_ANNOTATIONS = frozenset({"injectable", "Injectable"})

_CONSTRUCTED_TYPE = re.compile(r"(?:=>|\breturn\b)\s*(?:new\s+|const\s+)?([A-Za-z_]\w*)\s*[<(]")


def annotation_name(annotation: str) -> str:
    return annotation.strip().lstrip("@").split("(", 1)[0].strip()


class UseLazySingletonForBlocRule(BaseRule):
    """State containers must be shared singletons in the DI container.

    get_it: ``registerFactory`` of a Bloc/Cubit, by type argument or by the
    type built in the factory closure. injectable: a Bloc/Cubit class
    annotated ``@injectable`` rather than ``@lazySingleton``.
    """

    @property
    def rule_id(self) -> str:
        return "use_lazy_singleton_for_bloc"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return ANY_ROLE

    @property
    def description(self) -> str:
        return "BLoCs and Cubits should be registered as lazy singletons."

    def is_active(self, config: Configuration) -> bool:
        return config.di_style in (DiStyle.SERVICE_LOCATOR, DiStyle.CODE_GENERATED_INJECTOR)

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        suffixes = (config.bloc_suffix, config.cubit_suffix)
        if config.di_style == DiStyle.CODE_GENERATED_INJECTOR:
            return self._check_annotations(unit, suffixes)
        return self._check_registrations(unit, suffixes)

    def _check_registrations(self, unit: SourceUnit, suffixes: tuple[str, ...]) -> list[RawFinding]:
        findings = []
        for call in unit.invocations:
            if call.name not in PER_CALL_REGISTRATIONS:
                continue
            registered = self._registered_type(call.type_arguments, call.arguments)
            if registered is None or not registered.endswith(suffixes):
                continue
            findings.append(
                self._create_finding(
                    unit,
                    call.span,
                    f"'{registered}' is registered with {call.name}; "
                    "BLoCs and Cubits should be registered with registerLazySingleton.",
                    correction=f"Replace {call.name} with registerLazySingleton.",
                )
            )
        return findings

    def _check_annotations(self, unit: SourceUnit, suffixes: tuple[str, ...]) -> list[RawFinding]:
        findings = []
        for cls in unit.classes:
            if not self._is_state_container(cls, suffixes):
                continue
            for annotation in cls.annotations:
                if annotation_name(annotation) in PER_CALL_ANNOTATIONS:
                    findings.append(
                        self._create_finding(
                            unit,
                            cls.span,
                            f"'{cls.name}' is annotated {annotation}; "
                            "BLoCs and Cubits should be annotated @lazySingleton.",
                            correction=f"Replace {annotation} with @lazySingleton.",
                        )
                    )
        return findings

    @staticmethod
    def _registered_type(type_arguments: tuple[str, ...], arguments: tuple[str, ...]) -> str | None:
        if type_arguments:
            return type_name(type_arguments[0])
        if arguments:
            match = _CONSTRUCTED_TYPE.search(arguments[0])
            if match:
                return match.group(1)
        return None

    @staticmethod
    def _is_state_container(cls: ClassDecl, suffixes: tuple[str, ...]) -> bool:
        return cls.name.endswith(suffixes) or cls.superclass_name in ("Bloc", "Cubit")
