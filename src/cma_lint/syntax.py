"""Parser-independent view of a Dart compilation unit.

Rules only ever see these frozen records. ``cma_dart_tree`` produces them from
tree-sitter trees; tests build them directly.
"""

import re
from dataclasses import dataclass
from enum import Enum

from .models import Span

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_PASSTHROUGH = re.compile(r"^(this\.)?[A-Za-z_$][\w$]*$")


class MemberKind(str, Enum):
    CONSTRUCTOR = "constructor"
    FIELD = "field"
    METHOD = "method"
    GETTER = "getter"
    SETTER = "setter"
    OPERATOR = "operator"


@dataclass(frozen=True)
class Parameter:
    name: str
    named: bool = False
    required: bool = False

    @property
    def is_optional_named(self) -> bool:
        return self.named and not self.required


@dataclass(frozen=True)
class MemberDecl:
    """A class member: constructor, field, method, accessor or operator.

    ``body`` holds the source text of the body (the expression alone for
    ``=>`` bodies, the whole block otherwise) and is None for abstract members
    and fields. Constructors carry their name suffix (``fromJson`` for
    ``User.fromJson``) in ``name``, or an empty string for the unnamed one.
    """

    name: str
    kind: MemberKind
    span: Span
    is_static: bool = False
    return_type: str | None = None
    parameters: tuple[Parameter, ...] = ()
    body: str | None = None
    expression_body: bool = False

    @property
    def is_passthrough(self) -> bool:
        """True for ``=> name`` or ``=> this.name`` bodies"""
        return self.expression_body and self.body is not None and bool(_PASSTHROUGH.match(self.body.strip()))


@dataclass(frozen=True)
class ClassDecl:
    name: str
    span: Span
    superclass: str | None = None
    interfaces: tuple[str, ...] = ()
    modifiers: frozenset[str] = frozenset()
    annotations: tuple[str, ...] = ()
    members: tuple[MemberDecl, ...] = ()

    @property
    def superclass_name(self) -> str | None:
        return type_name(self.superclass) if self.superclass else None

    @property
    def interface_names(self) -> tuple[str, ...]:
        return tuple(type_name(interface) for interface in self.interfaces)

    @property
    def is_abstract(self) -> bool:
        return "abstract" in self.modifiers

    @property
    def is_private(self) -> bool:
        return self.name.startswith("_")

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset(m.name for m in self.members if m.kind == MemberKind.FIELD)

    def members_of(self, *kinds: MemberKind) -> list[MemberDecl]:
        return [m for m in self.members if m.kind in kinds]


@dataclass(frozen=True)
class ImportDirective:
    uri: str
    span: Span


@dataclass(frozen=True)
class Invocation:
    """A call or constructor invocation such as ``getIt.registerFactory<X>(...)``.

    ``arguments`` holds the source text of each argument.
    """

    name: str
    span: Span
    type_arguments: tuple[str, ...] = ()
    arguments: tuple[str, ...] = ()
    enclosing_class: str | None = None
    enclosing_function: str | None = None


@dataclass(frozen=True)
class SourceUnit:
    """Everything the rules may inspect in one file"""

    path: str
    imports: tuple[ImportDirective, ...] = ()
    classes: tuple[ClassDecl, ...] = ()
    invocations: tuple[Invocation, ...] = ()


def type_name(annotation: str) -> str:
    """Bare class name of a type annotation: ``core.Cubit<AuthState>?`` -> ``Cubit``"""
    base = annotation.split("<", 1)[0].strip().rstrip("?")
    names = _IDENTIFIER.findall(base)
    return names[-1] if names else annotation.strip()
