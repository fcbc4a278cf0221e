from dataclasses import dataclass, field
from typing import List

from tree_sitter import Tree

# tree-sitter-dart node types the extractor relies on
CLASS_DEFINITION = "class_definition"
CLASS_BODY = "class_body"
DECLARATION = "declaration"
METHOD_SIGNATURE = "method_signature"
FUNCTION_SIGNATURE = "function_signature"
FUNCTION_BODY = "function_body"
GETTER_SIGNATURE = "getter_signature"
SETTER_SIGNATURE = "setter_signature"
OPERATOR_SIGNATURE = "operator_signature"
CONSTRUCTOR_SIGNATURES = (
    "constructor_signature",
    "constant_constructor_signature",
    "factory_constructor_signature",
    "redirecting_factory_constructor_signature",
)
FIELD_LISTS = ("initialized_identifier_list", "static_final_declaration_list")
FIELD_ITEMS = ("initialized_identifier", "static_final_declaration")
ANNOTATIONS = ("annotation", "marker_annotation")
FORMAL_PARAMETER_LIST = "formal_parameter_list"
OPTIONAL_FORMAL_PARAMETERS = "optional_formal_parameters"
FORMAL_PARAMETER = "formal_parameter"
IMPORT_SPECIFICATION = "import_specification"
IMPORT_OR_EXPORT = "import_or_export"
URI = "uri"
ARGUMENT_PART = "argument_part"
ARGUMENTS = "arguments"
TYPE_ARGUMENTS = "type_arguments"
SELECTOR = "selector"
CONSTRUCTED_EXPRESSIONS = ("new_expression", "const_object_expression")
ERROR = "ERROR"

CLASS_MODIFIERS = frozenset({"abstract", "interface", "sealed", "base", "final", "mixin"})


@dataclass
class ParseResult:
    """Result of a tree-sitter parse operation"""

    tree: Tree
    source: bytes
    errors: List[str] = field(default_factory=list)
