import pytest

from cma_lint.classifier import classify, layer_of, normalize_path, resolve_import
from cma_lint.config import Configuration
from cma_lint.models import Role


@pytest.fixture
def config():
    return Configuration.defaults()


@pytest.mark.parametrize(
    "path, role",
    [
        ("lib/features/auth/domain/entities/user.dart", Role.ENTITY),
        ("lib/features/auth/data/models/user_model.dart", Role.MODEL),
        ("lib/features/auth/domain/usecases/login.dart", Role.DOMAIN),
        ("lib/features/auth/domain/repositories/auth_repository.dart", Role.DOMAIN),
        ("lib/features/auth/data/repositories/auth_repository_impl.dart", Role.DATA),
        ("lib/features/auth/presentation/pages/login_page.dart", Role.PRESENTATION),
        ("lib/core/common/cubits/session_cubit.dart", Role.GLOBAL_STATE_CONTAINER),
        ("lib/core/cubits/theme_cubit.dart", Role.GLOBAL_STATE_CONTAINER),
        ("lib/main.dart", Role.OTHER),
        ("lib/core/utils/strings.dart", Role.OTHER),
    ],
)
def test_classify_roles(config, path, role):
    assert classify(path, config) == role


def test_entity_wins_over_domain(config):
    # entities live under domain/, the more specific role is reported
    assert classify("lib/domain/entities/order.dart", config) == Role.ENTITY


def test_global_state_wins_over_everything(config):
    assert classify("lib/core/common/cubits/domain/entities/x.dart", config) == Role.GLOBAL_STATE_CONTAINER


def test_classify_windows_separators_and_case(config):
    assert classify(r"C:\App\lib\Features\Auth\Domain\Entities\User.dart", config) == Role.ENTITY
    assert classify(r"lib\features\auth\data\models\user_model.dart", config) == Role.MODEL


def test_classify_is_pure(config):
    path = "lib/features/auth/domain/entities/user.dart"
    assert classify(path, config) == classify(path, config)


def test_classify_respects_custom_patterns():
    config = Configuration(entity_patterns=("/domain/models/",), model_patterns=("/data/dtos/",))
    assert classify("lib/x/domain/models/user.dart", config) == Role.ENTITY
    assert classify("lib/x/data/dtos/user_dto.dart", config) == Role.MODEL
    assert classify("lib/x/domain/entities/user.dart", config) == Role.DOMAIN


def test_classify_custom_core_root():
    config = Configuration(core_root="shared")
    assert classify("lib/shared/cubits/theme_cubit.dart", config) == Role.GLOBAL_STATE_CONTAINER
    assert classify("lib/core/cubits/theme_cubit.dart", config) == Role.OTHER


def test_normalize_path():
    assert normalize_path(r"Lib\Main.dart") == "/lib/main.dart"
    assert normalize_path("/lib/a.dart") == "/lib/a.dart"


def test_layer_of_folds_nested_roles():
    assert layer_of(Role.ENTITY) == Role.DOMAIN
    assert layer_of(Role.MODEL) == Role.DATA
    assert layer_of(Role.GLOBAL_STATE_CONTAINER) == Role.PRESENTATION
    assert layer_of(Role.OTHER) == Role.OTHER


def test_resolve_import_relative():
    importer = "lib/features/auth/domain/usecases/login.dart"
    assert resolve_import("../../data/models/user_model.dart", importer) == "lib/features/auth/data/models/user_model.dart"
    assert resolve_import("helpers.dart", importer) == "lib/features/auth/domain/usecases/helpers.dart"


def test_resolve_import_package():
    assert resolve_import("package:my_app/features/auth/data/x.dart", "lib/a.dart") == "/features/auth/data/x.dart"


def test_resolve_import_other_package_when_name_is_known():
    importer = "lib/features/auth/domain/usecases/login.dart"
    assert resolve_import("package:timezone/data/latest.dart", importer, "my_app") is None
    assert resolve_import("package:my_app/features/auth/data/x.dart", importer, "my_app") == "/features/auth/data/x.dart"
    assert resolve_import("../../data/x.dart", importer, "my_app") == "lib/features/auth/data/x.dart"


def test_resolve_import_sdk_has_no_layer():
    assert resolve_import("dart:async", "lib/a.dart") is None
