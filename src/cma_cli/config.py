import re
import tomllib
from pathlib import Path

from cma_lint.config import ConfigError, Configuration

DEFAULT_CONFIG_FILE = Path("cma.toml")
PUBSPEC_FILE = "pubspec.yaml"

_PUBSPEC_NAME = re.compile(r"^name:\s*['\"]?([A-Za-z_][A-Za-z0-9_]*)['\"]?\s*(#.*)?$", re.MULTILINE)


def load_config(config_path: Path | None = None) -> Configuration:
    """Load cma.toml, or defaults when the file does not exist.

    When the file leaves ``package_name`` unset it is taken from the
    pubspec.yaml beside it, if there is one.

    Raises ConfigError for unreadable TOML and for invalid settings.
    """
    if config_path is None or not config_path.exists():
        config = Configuration.defaults()
    else:
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError([f"{config_path}: {exc}"]) from exc
        except OSError as exc:
            raise ConfigError([f"{config_path}: cannot read file ({exc.strerror or exc})"]) from exc
        config = Configuration.load(data)

    if not config.package_name:
        project_dir = config_path.parent if config_path is not None else Path.cwd()
        package_name = read_package_name(project_dir / PUBSPEC_FILE)
        if package_name:
            config = config.model_copy(update={"package_name": package_name})
    return config


def read_package_name(pubspec_path: Path) -> str | None:
    """Top-level ``name:`` of a pubspec, or None when it cannot be read"""
    try:
        text = pubspec_path.read_text(encoding="utf-8")
    except OSError:
        return None
    match = _PUBSPEC_NAME.search(text)
    return match.group(1) if match else None
