"""Builds cma_lint SourceUnits from tree-sitter Dart trees.

The extractor reads node types where the grammar is stable and falls back to
the node's source text where grammar versions disagree (class modifiers,
parameter names, constructor names).
"""

import re
from typing import List, Optional

from tree_sitter import Node

from cma_lint.syntax import (
    ClassDecl,
    ImportDirective,
    Invocation,
    MemberDecl,
    MemberKind,
    Parameter,
    SourceUnit,
)

from . import node_types as nt
from .ast_walker import ASTWalker
from .node_types import ParseResult

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_EXPRESSION_BODY = re.compile(r"^(?:async\*?|sync\*)?\s*=>\s*(.*?)\s*;?\s*$", re.S)
_IMPORT_URI = re.compile(r"""\bimport\s+r?['"]([^'"]+)['"]""")
_TRAILING_KEYWORD = re.compile(r"\b(get|set|operator)\s*$")
_MEMBER_MODIFIER = re.compile(r"\b(static|final|const|late|var|covariant|external)\b")

_COMMENTS = ("comment", "documentation_comment", "block_comment")
_CALLABLE_SIGNATURES = (
    (nt.FUNCTION_SIGNATURE, MemberKind.METHOD),
    (nt.GETTER_SIGNATURE, MemberKind.GETTER),
    (nt.SETTER_SIGNATURE, MemberKind.SETTER),
    (nt.OPERATOR_SIGNATURE, MemberKind.OPERATOR),
)


def split_types(text: str) -> List[str]:
    """Split a comma separated type list, ignoring commas inside <...>"""
    parts, depth, current = [], 0, []
    for char in text:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def _unquote(text: str) -> str:
    text = text.strip()
    if text.startswith("r"):
        text = text[1:]
    return text.strip("'\"")


class DeclarationExtractor:
    """Extracts imports, classes, members and call sites from a Dart AST"""

    def extract(self, path: str, result: ParseResult) -> SourceUnit:
        root = result.tree.root_node
        source = result.source
        return SourceUnit(
            path=path,
            imports=tuple(self._extract_imports(root, source)),
            classes=tuple(self._extract_classes(root, source)),
            invocations=tuple(self._extract_invocations(root, source)),
        )

    # -- imports -----------------------------------------------------------

    def _extract_imports(self, root: Node, source: bytes) -> List[ImportDirective]:
        imports = []
        for node in ASTWalker.find_all_by_type(root, nt.IMPORT_OR_EXPORT):
            uri = None
            specs = ASTWalker.find_all_by_type(node, nt.IMPORT_SPECIFICATION)
            if specs:
                uri_nodes = ASTWalker.find_all_by_type(specs[0], nt.URI)
                if uri_nodes:
                    uri = _unquote(ASTWalker.get_text(uri_nodes[0], source))
            if uri is None:
                match = _IMPORT_URI.search(ASTWalker.get_text(node, source))
                if match:
                    uri = match.group(1)
            if uri:
                imports.append(ImportDirective(uri=uri, span=ASTWalker.span_of(node)))
        return imports

    # -- classes -----------------------------------------------------------

    def _extract_classes(self, root: Node, source: bytes) -> List[ClassDecl]:
        classes = []
        for node in ASTWalker.find_all_by_type(root, nt.CLASS_DEFINITION):
            name_node = node.child_by_field_name("name") or ASTWalker.get_child_of_type(node, "identifier")
            if name_node is None:
                continue

            header = ASTWalker.text_between(source, node.start_byte, name_node.start_byte)
            words = set(_IDENTIFIER.findall(header))
            previous = node.prev_sibling
            if previous is not None and previous.type == nt.ERROR:
                # older grammars reject Dart 3 modifiers and leave them in an ERROR node
                words |= set(_IDENTIFIER.findall(ASTWalker.get_text(previous, source)))

            superclass = None
            superclass_node = node.child_by_field_name("superclass") or ASTWalker.get_child_of_type(node, "superclass")
            if superclass_node is not None:
                superclass = self._superclass_of(ASTWalker.get_text(superclass_node, source))

            interfaces = []
            interfaces_node = node.child_by_field_name("interfaces") or ASTWalker.get_child_of_type(node, "interfaces")
            if interfaces_node is not None:
                text = ASTWalker.get_text(interfaces_node, source)
                interfaces = split_types(re.sub(r"^\s*implements\b", "", text))

            body = node.child_by_field_name("body") or ASTWalker.get_child_of_type(node, nt.CLASS_BODY)
            classes.append(
                ClassDecl(
                    name=ASTWalker.get_text(name_node, source),
                    span=ASTWalker.span_of(name_node),
                    superclass=superclass,
                    interfaces=tuple(interfaces),
                    modifiers=frozenset(words & nt.CLASS_MODIFIERS),
                    annotations=tuple(self._annotations_of(node, source)),
                    members=tuple(self._extract_members(body, source)) if body is not None else (),
                )
            )
        return classes

    @staticmethod
    def _superclass_of(text: str) -> Optional[str]:
        """``extends Base<T> with Mixin`` -> ``Base<T>``"""
        extends_part = re.split(r"\bwith\b", text, maxsplit=1)[0].strip()
        if not extends_part.startswith("extends"):
            return None
        return extends_part[len("extends"):].strip() or None

    @staticmethod
    def _annotations_of(node: Node, source: bytes) -> List[str]:
        annotations = []
        previous = node.prev_named_sibling
        while previous is not None and previous.type in nt.ANNOTATIONS:
            annotations.insert(0, ASTWalker.get_text(previous, source))
            previous = previous.prev_named_sibling
        for child in node.children:
            if child.type in nt.ANNOTATIONS:
                annotations.append(ASTWalker.get_text(child, source))
        return annotations

    # -- members -----------------------------------------------------------

    def _extract_members(self, body: Node, source: bytes) -> List[MemberDecl]:
        members = []
        children = body.named_children
        for index, child in enumerate(children):
            if child.type == nt.METHOD_SIGNATURE:
                following = children[index + 1] if index + 1 < len(children) else None
                function_body = following if following is not None and following.type == nt.FUNCTION_BODY else None
                members.extend(self._members_from(child, function_body, source))
            elif child.type == nt.DECLARATION:
                members.extend(self._members_from(child, None, source))
        return members

    def _members_from(self, container: Node, function_body: Optional[Node], source: bytes) -> List[MemberDecl]:
        constructor = ASTWalker.get_child_of_type(container, *nt.CONSTRUCTOR_SIGNATURES)
        if constructor is not None:
            return [self._constructor(constructor, container, source)]

        field_list = ASTWalker.get_child_of_type(container, *nt.FIELD_LISTS)
        if field_list is not None:
            return self._fields(container, field_list, source)

        for signature_type, kind in _CALLABLE_SIGNATURES:
            signature = ASTWalker.get_child_of_type(container, signature_type)
            if signature is not None:
                return [self._callable(kind, signature, container, function_body, source)]
        return []

    def _constructor(self, signature: Node, container: Node, source: bytes) -> MemberDecl:
        params = ASTWalker.get_child_of_type(signature, nt.FORMAL_PARAMETER_LIST)
        head_end = params.start_byte if params is not None else signature.end_byte
        head = ASTWalker.text_between(source, signature.start_byte, head_end)
        words = _IDENTIFIER.findall(head)
        names = [w for w in words if w not in ("const", "factory", "external")]
        return MemberDecl(
            name=names[1] if len(names) > 1 else "",
            kind=MemberKind.CONSTRUCTOR,
            span=ASTWalker.span_of(container),
            parameters=tuple(self._parameters(params, source)) if params is not None else (),
        )

    def _fields(self, container: Node, field_list: Node, source: bytes) -> List[MemberDecl]:
        prefix = ASTWalker.text_between(source, container.start_byte, field_list.start_byte)
        words = set(_IDENTIFIER.findall(prefix))
        field_type = _MEMBER_MODIFIER.sub("", prefix).strip() or None

        items = [c for c in field_list.named_children if c.type in nt.FIELD_ITEMS]
        if not items:
            items = [c for c in field_list.named_children if c.type == "identifier"]

        fields = []
        for item in items:
            name_node = item if item.type == "identifier" else (
                item.child_by_field_name("name") or ASTWalker.get_child_of_type(item, "identifier")
            )
            if name_node is None:
                continue
            fields.append(
                MemberDecl(
                    name=ASTWalker.get_text(name_node, source),
                    kind=MemberKind.FIELD,
                    span=ASTWalker.span_of(item),
                    is_static="static" in words,
                    return_type=field_type,
                )
            )
        return fields

    def _callable(
        self,
        kind: MemberKind,
        signature: Node,
        container: Node,
        function_body: Optional[Node],
        source: bytes,
    ) -> MemberDecl:
        name_node = self._name_node(signature)
        if kind == MemberKind.OPERATOR:
            operator = signature.child_by_field_name("operator")
            symbol = ASTWalker.get_text(operator, source) if operator is not None else ""
            name = f"operator{symbol}"
            type_end = operator.start_byte if operator is not None else signature.start_byte
        else:
            name = ASTWalker.get_text(name_node, source) if name_node is not None else ""
            type_end = name_node.start_byte if name_node is not None else signature.start_byte

        return_type = _TRAILING_KEYWORD.sub("", ASTWalker.text_between(source, signature.start_byte, type_end))
        return_type = return_type.strip() or None

        prefix = ASTWalker.text_between(source, container.start_byte, signature.start_byte)
        params = ASTWalker.get_child_of_type(signature, nt.FORMAL_PARAMETER_LIST)

        body, expression_body = None, False
        if function_body is not None:
            body_text = ASTWalker.get_text(function_body, source).strip()
            match = _EXPRESSION_BODY.match(body_text)
            if match:
                body, expression_body = match.group(1), True
            else:
                body = body_text

        return MemberDecl(
            name=name,
            kind=kind,
            span=ASTWalker.span_of(container),
            is_static="static" in _IDENTIFIER.findall(prefix),
            return_type=return_type,
            parameters=tuple(self._parameters(params, source)) if params is not None else (),
            body=body,
            expression_body=expression_body,
        )

    @staticmethod
    def _name_node(signature: Node) -> Optional[Node]:
        name_node = signature.child_by_field_name("name")
        if name_node is not None:
            return name_node
        identifiers = [c for c in signature.children if c.type == "identifier"]
        return identifiers[-1] if identifiers else None

    def _parameters(self, param_list: Node, source: bytes) -> List[Parameter]:
        parameters = []
        for node in ASTWalker.find_all_by_type(param_list, nt.FORMAL_PARAMETER):
            # parameters of function-typed parameters belong to a nested list
            owner = ASTWalker.find_parent_of_type(node, nt.FORMAL_PARAMETER, nt.FORMAL_PARAMETER_LIST)
            if owner != param_list:
                continue

            text = ASTWalker.get_text(node, source)
            names = _IDENTIFIER.findall(text)
            if not names:
                continue
            optional_group = ASTWalker.find_parent_of_type(node, nt.OPTIONAL_FORMAL_PARAMETERS)
            named = optional_group is not None and ASTWalker.get_text(optional_group, source).lstrip().startswith("{")
            previous = node.prev_sibling
            required = "required" in names[:-1] or (
                previous is not None and ASTWalker.get_text(previous, source) == "required"
            )
            parameters.append(Parameter(name=names[-1], named=named, required=required))
        return parameters

    # -- call sites --------------------------------------------------------

    def _extract_invocations(self, root: Node, source: bytes) -> List[Invocation]:
        invocations = []
        for part in ASTWalker.find_all_by_type(root, nt.ARGUMENT_PART):
            anchor = part.parent if part.parent is not None and part.parent.type == nt.SELECTOR else part
            callee = anchor.prev_named_sibling
            name = self._callee_name(callee, source)
            if name is None:
                continue
            invocations.append(
                self._invocation(
                    name,
                    callee,
                    ASTWalker.get_child_of_type(part, nt.TYPE_ARGUMENTS),
                    ASTWalker.get_child_of_type(part, nt.ARGUMENTS),
                    source,
                )
            )

        for expression in ASTWalker.find_all_by_type(root, *nt.CONSTRUCTED_EXPRESSIONS):
            type_node = ASTWalker.get_child_of_type(expression, "type_identifier", "identifier")
            if type_node is None:
                continue
            invocations.append(
                self._invocation(
                    ASTWalker.get_text(type_node, source),
                    type_node,
                    ASTWalker.get_child_of_type(expression, nt.TYPE_ARGUMENTS),
                    ASTWalker.get_child_of_type(expression, nt.ARGUMENTS),
                    source,
                )
            )
        return invocations

    @staticmethod
    def _callee_name(callee: Optional[Node], source: bytes) -> Optional[str]:
        if callee is None:
            return None
        if callee.type in ("identifier", "type_identifier"):
            return ASTWalker.get_text(callee, source)
        if callee.type == nt.SELECTOR:
            identifiers = ASTWalker.find_all_by_type(callee, "identifier")
            if identifiers:
                return ASTWalker.get_text(identifiers[-1], source)
        return None

    def _invocation(
        self, name: str, anchor: Node, type_args: Optional[Node], args: Optional[Node], source: bytes
    ) -> Invocation:
        type_arguments = []
        if type_args is not None:
            type_arguments = split_types(ASTWalker.get_text(type_args, source).strip()[1:-1])
        arguments = []
        if args is not None:
            arguments = [ASTWalker.get_text(a, source) for a in args.named_children if a.type not in _COMMENTS]

        owner = ASTWalker.find_parent_of_type(anchor, nt.CLASS_DEFINITION)
        owner_name = owner.child_by_field_name("name") if owner is not None else None
        return Invocation(
            name=name,
            span=ASTWalker.span_of(anchor),
            type_arguments=tuple(type_arguments),
            arguments=tuple(arguments),
            enclosing_class=ASTWalker.get_text(owner_name, source) if owner_name is not None else None,
            enclosing_function=self._enclosing_function(anchor, source),
        )

    def _enclosing_function(self, node: Node, source: bytes) -> Optional[str]:
        body = ASTWalker.find_parent_of_type(node, nt.FUNCTION_BODY)
        while body is not None:
            name = self._signature_name(body.prev_named_sibling, source)
            if name is not None:
                return name
            body = ASTWalker.find_parent_of_type(body, nt.FUNCTION_BODY)
        return None

    def _signature_name(self, signature: Optional[Node], source: bytes) -> Optional[str]:
        if signature is None:
            return None
        if signature.type == nt.METHOD_SIGNATURE:
            inner = ASTWalker.get_child_of_type(
                signature,
                nt.FUNCTION_SIGNATURE,
                nt.GETTER_SIGNATURE,
                nt.SETTER_SIGNATURE,
                *nt.CONSTRUCTOR_SIGNATURES,
            )
            return self._signature_name(inner, source) if inner is not None else None
        if signature.type in (nt.FUNCTION_SIGNATURE, nt.GETTER_SIGNATURE, nt.SETTER_SIGNATURE):
            name_node = self._name_node(signature)
            return ASTWalker.get_text(name_node, source) if name_node is not None else None
        if signature.type in nt.CONSTRUCTOR_SIGNATURES:
            identifiers = ASTWalker.find_all_by_type(signature, "identifier")
            return ASTWalker.get_text(identifiers[0], source) if identifiers else None
        return None
