"""Configuration model for the Clean Architecture linter.

A configuration document is a nested mapping (usually read from ``cma.toml``)::

    [clean_modular_architecture.structure]
    features_path = "features"
    core_path = "core"
    package_name = "my_app"

    [clean_modular_architecture.naming]
    model_suffix = "Model"

    [clean_modular_architecture.lint]
    enabled = true
    severity = { entity_no_methods = "error", model_extends_entity = "warning" }

    [clean_modular_architecture.templates]
    state_management = "bloc"
    di_package = "get_it"

Absent keys take their defaults. A key that is present but invalid is an
error and is never replaced by its default. Unknown keys inside a known
section are errors too; unknown sections are ignored.
"""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import Severity

ROOT_KEY = "clean_modular_architecture"

# (section, key) in the document -> field on Configuration
_DOCUMENT_KEYS = {
    ("structure", "features_path"): "features_root",
    ("structure", "core_path"): "core_root",
    ("structure", "entity_patterns"): "entity_patterns",
    ("structure", "model_patterns"): "model_patterns",
    ("structure", "global_state_dirs"): "global_state_dirs",
    ("structure", "composition_root"): "composition_root",
    ("structure", "package_name"): "package_name",
    ("naming", "entity_suffix"): "entity_suffix",
    ("naming", "model_suffix"): "model_suffix",
    ("naming", "repository_suffix"): "repository_suffix",
    ("naming", "bloc_suffix"): "bloc_suffix",
    ("naming", "cubit_suffix"): "cubit_suffix",
    ("naming", "event_suffix"): "event_suffix",
    ("naming", "state_suffix"): "state_suffix",
    ("lint", "enabled"): "lint_enabled",
    ("lint", "severity"): "severity_overrides",
    ("templates", "state_management"): "state_container_style",
    ("templates", "di_package"): "di_style",
}
_SECTIONS = frozenset(section for section, _ in _DOCUMENT_KEYS)


class StateContainerStyle(str, Enum):
    BLOC = "bloc"
    CUBIT = "cubit"
    RIVERPOD = "riverpod"
    PROVIDER = "provider"


class DiStyle(str, Enum):
    SERVICE_LOCATOR = "get_it"
    CODE_GENERATED_INJECTOR = "injectable"
    RIVERPOD = "riverpod"


class ConfigError(Exception):
    """Raised when a configuration document cannot produce a valid Configuration"""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid configuration")


class Configuration(BaseModel):
    """Immutable settings shared by the classifier, the rules and the reporter"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    features_root: str = Field(default="features", min_length=1)
    core_root: str = Field(default="core", min_length=1)
    entity_patterns: tuple[str, ...] = ("/domain/entities/",)
    model_patterns: tuple[str, ...] = ("/data/models/",)
    global_state_dirs: tuple[str, ...] = ("common/cubits", "cubits")
    composition_root: str = Field(default="main", min_length=1)
    # pubspec name of the linted app; empty treats every package: import as the app's own
    package_name: str = ""

    entity_suffix: str = ""
    model_suffix: str = Field(default="Model", min_length=1)
    repository_suffix: str = Field(default="Repository", min_length=1)
    bloc_suffix: str = Field(default="Bloc", min_length=1)
    cubit_suffix: str = Field(default="Cubit", min_length=1)
    event_suffix: str = Field(default="Event", min_length=1)
    state_suffix: str = Field(default="State", min_length=1)

    lint_enabled: bool = True
    severity_overrides: Mapping[str, Severity] = Field(default_factory=dict, validate_default=True)

    state_container_style: StateContainerStyle = StateContainerStyle.BLOC
    di_style: DiStyle = DiStyle.SERVICE_LOCATOR

    @field_validator("severity_overrides")
    @classmethod
    def freeze_overrides(cls, value: Mapping[str, Severity]) -> Mapping[str, Severity]:
        return MappingProxyType(dict(value))

    @classmethod
    def defaults(cls) -> "Configuration":
        return cls()

    @classmethod
    def load(cls, document: Mapping[str, Any] | None) -> "Configuration":
        """Build a configuration from a parsed document, merging over defaults.

        Raises ConfigError listing every problem found, not just the first.
        """
        if not document or ROOT_KEY not in document:
            return cls()

        root = document[ROOT_KEY]
        if not isinstance(root, Mapping):
            raise ConfigError([f"{ROOT_KEY} must be a table"])

        errors: list[str] = []
        fields: dict[str, Any] = {}
        for section_name, section in root.items():
            if section_name not in _SECTIONS:
                continue
            if not isinstance(section, Mapping):
                errors.append(f"{section_name} must be a table")
                continue
            for key, value in section.items():
                field_name = _DOCUMENT_KEYS.get((section_name, key))
                if field_name is None:
                    errors.append(f"Unknown setting: {section_name}.{key}")
                else:
                    fields[field_name] = value

        try:
            config = cls.model_validate(fields)
        except ValidationError as exc:
            errors.extend(_describe_errors(exc))
            raise ConfigError(errors) from exc

        if errors:
            raise ConfigError(errors)
        return config

    def validate(self) -> list[str]:
        """Re-check the current field values and return every problem found.

        Never raises; an empty list means the configuration is valid.
        """
        values = {name: getattr(self, name) for name in type(self).model_fields}
        try:
            type(self).model_validate(values)
        except ValidationError as exc:
            return _describe_errors(exc)
        return []

    def severity_of(self, rule_id: str, default: Severity = Severity.ERROR) -> Severity:
        """Configured severity for a rule, falling back to ``default``"""
        severity = self.severity_overrides.get(rule_id)
        if severity is None:
            return default
        try:
            return Severity(severity)
        except ValueError:
            return default

    def to_model_name(self, entity_name: str) -> str:
        return f"{entity_name}{self.model_suffix}"

    def to_entity_name(self, model_name: str) -> str:
        """Strip the model suffix; names without it are returned unchanged."""
        if self.model_suffix and model_name.endswith(self.model_suffix):
            return model_name[: -len(self.model_suffix)]
        return model_name

    def paired_entity_name(self, model_name: str) -> str:
        """Entity class a model-suffixed class is expected to extend"""
        return f"{self.to_entity_name(model_name)}{self.entity_suffix}"

    @property
    def global_state_patterns(self) -> tuple[str, ...]:
        core = self.core_root.replace("\\", "/").strip("/").lower()
        return tuple(f"/{core}/{directory.strip('/').lower()}/" for directory in self.global_state_dirs)


def _describe_errors(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        loc = error["loc"]
        field_name = str(loc[0]) if loc else "configuration"
        value = error.get("input")
        if field_name == "severity_overrides" and len(loc) > 1:
            messages.append(f"Invalid severity for {loc[1]}: {value}")
        elif error["type"] == "string_too_short":
            messages.append(f"{field_name} cannot be empty")
        elif error["type"] == "enum":
            messages.append(f"Invalid {field_name}: {value}")
        elif error["type"] == "extra_forbidden":
            messages.append(f"Unknown setting: {field_name}")
        else:
            messages.append(f"{field_name}: {error['msg']}")
    return messages
