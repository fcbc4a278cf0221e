import re

from ..classifier import normalize_path
from ..config import Configuration, StateContainerStyle
from ..models import ANY_ROLE, RawFinding, Role
from ..syntax import MemberKind, SourceUnit, type_name
from .base import BaseRule

BLOC_STYLES = (StateContainerStyle.BLOC, StateContainerStyle.CUBIT)

_BLOC_DIRS = ("/bloc/", "/blocs/", "/cubit/", "/cubits/")
_BLOC_FILE_ENDINGS = ("_bloc.dart", "_cubit.dart", "_event.dart", "_state.dart")

# Field types that mean the container runs business logic itself
COMPLEX_DEPENDENCY_SUFFIXES = ("Repository", "UseCase", "Service", "DataSource")

_AWAIT = re.compile(r"\bawait\b")
_TRY = re.compile(r"\btry\b")

COMPOSITE_PROVIDERS = {
    StateContainerStyle.BLOC: "MultiBlocProvider",
    StateContainerStyle.CUBIT: "MultiBlocProvider",
    StateContainerStyle.PROVIDER: "MultiProvider",
}


def is_bloc_file(path: str) -> bool:
    normalized = normalize_path(path)
    return any(d in normalized for d in _BLOC_DIRS) or normalized.endswith(_BLOC_FILE_ENDINGS)


def has_business_logic(body: str | None) -> bool:
    """Business-logic heuristic: the body both awaits and guards with try"""
    if body is None:
        return False
    return bool(_AWAIT.search(body)) and bool(_TRY.search(body))


class BlocNamingConventionRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "bloc_naming_convention"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return ANY_ROLE

    @property
    def description(self) -> str:
        return "Bloc, Cubit, Event and State classes should carry their configured suffixes."

    def is_active(self, config: Configuration) -> bool:
        return config.state_container_style in BLOC_STYLES

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        if not is_bloc_file(unit.path):
            return []

        normalized = normalize_path(unit.path)
        findings = []
        for cls in unit.classes:
            if cls.superclass is None:
                continue

            expected = None
            if cls.superclass_name == "Bloc":
                expected = ("BLoC", config.bloc_suffix)
            elif cls.superclass_name == "Cubit":
                expected = ("Cubit", config.cubit_suffix)
            elif normalized.endswith("_event.dart"):
                expected = ("Event", config.event_suffix)
            elif normalized.endswith("_state.dart"):
                expected = ("State", config.state_suffix)

            if expected is None:
                continue
            kind, suffix = expected
            if cls.name.endswith(suffix):
                continue
            findings.append(
                self._create_finding(
                    unit,
                    cls.span,
                    f'{kind} class \'{cls.name}\' should end with "{suffix}".',
                    correction=f'Rename this class to end with "{suffix}".',
                )
            )
        return findings


class CubitSimpleStateRule(BaseRule):
    """Global cubits track state only; logic lives in feature BLoCs."""

    @property
    def rule_id(self) -> str:
        return "cubit_simple_state"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return frozenset({Role.GLOBAL_STATE_CONTAINER})

    @property
    def description(self) -> str:
        return "Global Cubits should only track state, not perform complex operations."

    def is_active(self, config: Configuration) -> bool:
        return config.state_container_style in BLOC_STYLES

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        findings = []
        for cls in unit.classes:
            if cls.superclass_name != "Cubit":
                continue
            for member in cls.members:
                if member.kind == MemberKind.FIELD and member.return_type:
                    dependency = type_name(member.return_type)
                    if dependency.endswith(COMPLEX_DEPENDENCY_SUFFIXES):
                        findings.append(
                            self._create_finding(
                                unit,
                                member.span,
                                f"Global Cubit '{cls.name}' depends on '{dependency}'; "
                                "global Cubits should only track state.",
                                correction="Move business logic to a feature BLoC.",
                            )
                        )
                elif member.kind == MemberKind.METHOD and has_business_logic(member.body):
                    findings.append(
                        self._create_finding(
                            unit,
                            member.span,
                            f"Global Cubit '{cls.name}' performs async business logic in '{member.name}'.",
                            correction="Move business logic to a feature BLoC and use the Cubit only for state tracking.",
                        )
                    )
        return findings


class BlocInMultiProviderRule(BaseRule):
    """Composite providers belong in the composition root (``main``)."""

    @property
    def rule_id(self) -> str:
        return "bloc_in_multiprovider"

    @property
    def applicable_roles(self) -> frozenset[Role]:
        return ANY_ROLE

    @property
    def description(self) -> str:
        return "MultiBlocProvider should be created in main(), not in widgets."

    def is_active(self, config: Configuration) -> bool:
        return config.state_container_style in COMPOSITE_PROVIDERS

    def check(self, unit: SourceUnit, role: Role, config: Configuration) -> list[RawFinding]:
        composite = COMPOSITE_PROVIDERS[config.state_container_style]
        findings = []
        for call in unit.invocations:
            if call.name != composite:
                continue
            if call.enclosing_class is None and call.enclosing_function == config.composition_root:
                continue
            if call.enclosing_class:
                location = f"{call.enclosing_class}.{call.enclosing_function}"
            else:
                location = call.enclosing_function or "top level"
            findings.append(
                self._create_finding(
                    unit,
                    call.span,
                    f"{composite} is created in {location}; it should be in {config.composition_root}().",
                    correction=f"Move {composite} to {config.composition_root}() and wrap your app with it.",
                )
            )
        return findings
