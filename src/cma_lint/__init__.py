from .classifier import classify, layer_of, resolve_import
from .config import ConfigError, Configuration, DiStyle, StateContainerStyle
from .engine import LinterEngine
from .faults import Fault, FaultKind, ParseError
from .models import ANY_ROLE, Diagnostic, RawFinding, Role, Severity, Span
from .registry import RuleRegistry
from .reporter import resolve

__all__ = [
    "ANY_ROLE",
    "ConfigError",
    "Configuration",
    "Diagnostic",
    "DiStyle",
    "Fault",
    "FaultKind",
    "LinterEngine",
    "ParseError",
    "RawFinding",
    "Role",
    "RuleRegistry",
    "Severity",
    "Span",
    "StateContainerStyle",
    "classify",
    "layer_of",
    "resolve",
    "resolve_import",
]
