import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from route_params.core.version import detect_async_request_api

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class LintOptions(BaseModel):
    """Options shared by every lint entry point.

    ``wrap_in_promise`` set to ``None`` means the flag is detected from the
    ``next`` dependency in ``project_root/package.json``.
    """

    model_config = ConfigDict(frozen=True)

    search_params: bool = True
    project_root: Path = Field(default_factory=Path.cwd)
    wrap_in_promise: bool | None = None

    def resolve_wrap_in_promise(self) -> bool | None:
        if self.wrap_in_promise is not None:
            return self.wrap_in_promise
        return detect_async_request_api(self.project_root)


def parse_async_request_api(value: str) -> bool | None:
    normalized = value.strip().lower()
    if normalized in ("", "auto"):
        return None
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid async request API setting '{value}'. Expected auto, true or false.")


def get_options(
    search_params: bool | None = None,
    project_root: Path | None = None,
    async_request_api: str | None = None,
) -> LintOptions:
    """Build options from explicit values, falling back to the environment."""
    if search_params is None:
        search_params = os.getenv("ROUTE_PARAMS_SEARCH_PARAMS", "true").strip().lower() not in _FALSE_VALUES
    if project_root is None:
        project_root = Path(os.getenv("ROUTE_PARAMS_PROJECT_ROOT", str(Path.cwd())))
    if async_request_api is None:
        async_request_api = os.getenv("ROUTE_PARAMS_ASYNC_REQUEST_API", "auto")
    return LintOptions(
        search_params=search_params,
        project_root=project_root,
        wrap_in_promise=parse_async_request_api(async_request_api),
    )
