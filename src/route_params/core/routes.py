from dataclasses import dataclass
from pathlib import PurePath, PurePosixPath, PureWindowsPath

from route_params.models import FileRole, RouteParameterSpec

ROUTING_ROOT = "app"

PARAMS_PROP_NAME = "params"
SEARCH_PARAMS_PROP_NAME = "searchParams"
CHILDREN_PROP_NAME = "children"

_CATCH_ALL_MARKER = "..."

_ALLOWED_PROPS: dict[FileRole, frozenset[str]] = {
    "page": frozenset({PARAMS_PROP_NAME, SEARCH_PARAMS_PROP_NAME}),
    "layout": frozenset({PARAMS_PROP_NAME, CHILDREN_PROP_NAME}),
    "default": frozenset({PARAMS_PROP_NAME}),
    "route": frozenset({PARAMS_PROP_NAME}),
}

_FILE_ROLES: dict[str, FileRole] = {
    "page": "page",
    "layout": "layout",
    "default": "default",
    "route": "route",
}


@dataclass(frozen=True)
class FileInfo:
    path: str
    dirname: str
    role: FileRole | None
    in_routing_root: bool
    params: tuple[RouteParameterSpec, ...]

    @property
    def is_routable(self) -> bool:
        return self.role is not None and self.in_routing_root

    @property
    def allowed_props(self) -> frozenset[str]:
        return allowed_props_for(self.role) if self.role else frozenset()


def to_posix_path(path: str) -> str:
    if "\\" in path:
        return PureWindowsPath(path).as_posix()
    return PurePosixPath(path).as_posix()


def _is_dynamic(folder: str) -> bool:
    return len(folder) > 2 and folder.startswith("[") and folder.endswith("]")


def read_route_parameters(dirname: str) -> list[RouteParameterSpec]:
    """Return the dynamic segments of ``dirname`` below the routing root, root to leaf.

    ``dirname`` must use forward slashes. Without a routing root folder the
    result is empty. The last spec is flagged as the current segment when the
    directory itself is dynamic. Duplicate names are kept as they are.
    """
    folders = dirname.split("/")
    if ROUTING_ROOT not in folders:
        return []
    routed = folders[folders.index(ROUTING_ROOT) :]

    specs: list[RouteParameterSpec] = []
    for folder in routed:
        if not _is_dynamic(folder):
            continue
        inner = folder[1:-1]
        catch_all = inner.startswith(_CATCH_ALL_MARKER)
        name = inner[len(_CATCH_ALL_MARKER) :] if catch_all else inner
        specs.append(RouteParameterSpec(name=name, catch_all=catch_all))

    if specs and _is_dynamic(routed[-1]):
        specs[-1] = specs[-1].model_copy(update={"is_current_segment": True})
    return specs


def file_role(filename: str) -> FileRole | None:
    return _FILE_ROLES.get(PurePosixPath(to_posix_path(filename)).stem)


def allowed_props_for(role: FileRole) -> frozenset[str]:
    return _ALLOWED_PROPS[role]


def get_file_info(path: str | PurePath) -> FileInfo:
    posix = to_posix_path(str(path))
    dirname = str(PurePosixPath(posix).parent)
    return FileInfo(
        path=posix,
        dirname=dirname,
        role=file_role(posix),
        in_routing_root=ROUTING_ROOT in dirname.split("/"),
        params=tuple(read_route_parameters(dirname)),
    )
