import pytest

from cma_lint.config import ConfigError, Configuration, DiStyle, StateContainerStyle
from cma_lint.models import Severity


def test_config_defaults():
    config = Configuration.defaults()
    assert config.features_root == "features"
    assert config.core_root == "core"
    assert config.model_suffix == "Model"
    assert config.entity_suffix == ""
    assert config.lint_enabled is True
    assert config.state_container_style == StateContainerStyle.BLOC
    assert config.di_style == DiStyle.SERVICE_LOCATOR
    assert config.validate() == []


def test_config_is_frozen():
    config = Configuration.defaults()
    with pytest.raises(Exception):
        config.model_suffix = "Dto"


def test_load_merges_document_over_defaults():
    document = {
        "clean_modular_architecture": {
            "structure": {"features_path": "lib/features"},
            "naming": {"model_suffix": "Dto"},
            "lint": {"severity": {"entity_no_methods": "warning"}},
            "templates": {"state_management": "cubit", "di_package": "injectable"},
        }
    }
    config = Configuration.load(document)

    assert config.features_root == "lib/features"
    assert config.core_root == "core"
    assert config.model_suffix == "Dto"
    assert config.severity_overrides == {"entity_no_methods": Severity.WARNING}
    assert config.state_container_style == StateContainerStyle.CUBIT
    assert config.di_style == DiStyle.CODE_GENERATED_INJECTOR


def test_load_without_root_key_returns_defaults():
    assert Configuration.load({}) == Configuration.defaults()
    assert Configuration.load({"other_tool": {"x": 1}}) == Configuration.defaults()


def test_load_collects_every_error():
    document = {
        "clean_modular_architecture": {
            "structure": {"features_path": "", "core_path": ""},
            "lint": {"severity": {"entity_no_methods": "fatal"}},
            "templates": {"state_management": "mobx", "di_package": "kiwi"},
        }
    }
    with pytest.raises(ConfigError) as exc_info:
        Configuration.load(document)

    errors = exc_info.value.errors
    assert "features_root cannot be empty" in errors
    assert "core_root cannot be empty" in errors
    assert "Invalid severity for entity_no_methods: fatal" in errors
    assert "Invalid state_container_style: mobx" in errors
    assert "Invalid di_style: kiwi" in errors
    assert len(errors) == 5


def test_load_rejects_non_table_section():
    with pytest.raises(ConfigError) as exc_info:
        Configuration.load({"clean_modular_architecture": {"naming": "Model"}})
    assert exc_info.value.errors == ["naming must be a table"]


def test_validate_reports_two_invalid_fields_in_one_call():
    config = Configuration.defaults().model_copy(
        update={"features_root": "", "state_container_style": "mobx"}
    )
    errors = config.validate()
    assert len(errors) == 2
    assert "features_root cannot be empty" in errors
    assert "Invalid state_container_style: mobx" in errors


def test_validate_empty_model_suffix():
    config = Configuration.defaults().model_copy(update={"model_suffix": ""})
    assert config.validate() == ["model_suffix cannot be empty"]


def test_severity_of_defaults_to_error():
    config = Configuration.defaults()
    assert config.severity_of("unknown_rule") == Severity.ERROR
    assert config.severity_of("parse_error", Severity.INFO) == Severity.INFO


def test_severity_of_uses_override():
    config = Configuration(severity_overrides={"entity_no_methods": "warning"})
    assert config.severity_of("entity_no_methods") == Severity.WARNING


def test_severity_ordering():
    assert Severity.ERROR > Severity.WARNING > Severity.INFO > Severity.IGNORE
    assert max([Severity.INFO, Severity.ERROR, Severity.WARNING]) == Severity.ERROR


@pytest.mark.parametrize("name", ["User", "AuthResponse", "Model", "UserModelX"])
def test_model_name_round_trip(name):
    config = Configuration.defaults()
    assert config.to_entity_name(config.to_model_name(name)) == name


def test_naming_transformer():
    config = Configuration.defaults()
    assert config.to_model_name("User") == "UserModel"
    assert config.to_entity_name("AuthResponseModel") == "AuthResponse"


def test_to_entity_name_is_permissive():
    config = Configuration.defaults()
    assert config.to_entity_name("UserDto") == "UserDto"


def test_paired_entity_name_uses_entity_suffix():
    config = Configuration(entity_suffix="Entity")
    assert config.paired_entity_name("UserModel") == "UserEntity"


def test_global_state_patterns_follow_core_root():
    config = Configuration(core_root="lib/core")
    assert config.global_state_patterns == ("/lib/core/common/cubits/", "/lib/core/cubits/")


def test_severity_overrides_are_read_only():
    config = Configuration.load({"clean_modular_architecture": {"lint": {"severity": {"entity_no_methods": "info"}}}})
    with pytest.raises(TypeError):
        config.severity_overrides["entity_no_methods"] = Severity.IGNORE
    with pytest.raises(TypeError):
        Configuration.defaults().severity_overrides["model_extends_entity"] = Severity.IGNORE
    assert config.severity_of("entity_no_methods") == Severity.INFO


def test_severity_overrides_copy_their_source():
    overrides = {"entity_no_methods": "warning"}
    config = Configuration(severity_overrides=overrides)
    overrides["entity_no_methods"] = "ignore"
    assert config.severity_of("entity_no_methods") == Severity.WARNING


def test_load_reports_unknown_keys_in_known_sections():
    document = {
        "clean_modular_architecture": {
            "naming": {"model_sufix": "Dto", "entity_suffix": "Entity"},
            "lint": {"enable": False},
            "analyzer": {"anything": "goes"},
        }
    }
    with pytest.raises(ConfigError) as exc_info:
        Configuration.load(document)
    assert exc_info.value.errors == ["Unknown setting: naming.model_sufix", "Unknown setting: lint.enable"]


def test_load_reports_unknown_keys_alongside_invalid_values():
    document = {"clean_modular_architecture": {"structure": {"core_path": "", "feature_path": "features"}}}
    with pytest.raises(ConfigError) as exc_info:
        Configuration.load(document)
    assert exc_info.value.errors == ["Unknown setting: structure.feature_path", "core_root cannot be empty"]


def test_load_package_name():
    config = Configuration.load({"clean_modular_architecture": {"structure": {"package_name": "my_app"}}})
    assert config.package_name == "my_app"
    assert Configuration.defaults().package_name == ""
