import posixpath

from .config import Configuration
from .models import Role

# Roles nested inside a broader layer report that layer for import checks
_LAYER_OF = {
    Role.ENTITY: Role.DOMAIN,
    Role.MODEL: Role.DATA,
    Role.GLOBAL_STATE_CONTAINER: Role.PRESENTATION,
}


def normalize_path(path: str) -> str:
    """Forward slashes, lowercase, always with a leading slash"""
    normalized = str(path).replace("\\", "/").lower()
    if not normalized.startswith("/"):
        normalized = "/" + normalized
    return normalized


def classify(path: str, config: Configuration) -> Role:
    """Map a file path to exactly one architectural role.

    More specific roles are tested before the layer they are nested in:
    entities live under domain/ and models under data/.
    """
    normalized = normalize_path(path)

    if any(pattern in normalized for pattern in config.global_state_patterns):
        return Role.GLOBAL_STATE_CONTAINER
    if any(pattern.lower() in normalized for pattern in config.entity_patterns):
        return Role.ENTITY
    if any(pattern.lower() in normalized for pattern in config.model_patterns):
        return Role.MODEL
    if "/domain/" in normalized:
        return Role.DOMAIN
    if "/data/" in normalized:
        return Role.DATA
    if "/presentation/" in normalized:
        return Role.PRESENTATION
    return Role.OTHER


def layer_of(role: Role) -> Role:
    return _LAYER_OF.get(role, role)


def resolve_import(uri: str, importer_path: str, package_name: str = "") -> str | None:
    """Turn an import URI into a path the classifier can judge.

    Returns None for SDK libraries (``dart:``), which belong to no layer, and
    for ``package:`` URIs of other packages when ``package_name`` is known.
    Without a package name every ``package:`` URI is judged by its path.
    """
    if uri.startswith("dart:"):
        return None
    if uri.startswith("package:"):
        package, _, rest = uri[len("package:"):].partition("/")
        if package_name and package != package_name:
            return None
        return "/" + rest
    importer_dir = posixpath.dirname(str(importer_path).replace("\\", "/"))
    return posixpath.normpath(posixpath.join(importer_dir, uri))
