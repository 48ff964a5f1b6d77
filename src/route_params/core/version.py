"""Detect whether the project targets the async request API (Next.js 15+).

The answer comes from the ``next`` dependency range in ``package.json``:
major 13 means plain ``params`` objects, anything above 14 means
``Promise``-wrapped ones, and everything else is left undecided.
"""

import json
import logging
from pathlib import Path
from typing import Any

from nodesemver import ANY, SemVer, gt, make_range, make_semver

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"

Version = tuple[int, int, int]


def read_manifest(project_root: Path) -> dict[str, Any] | None:
    manifest_path = project_root / PACKAGE_JSON
    if not manifest_path.is_file():
        return None
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("Could not read %s", manifest_path)
        return None
    return data if isinstance(data, dict) else None


def next_dependency_range(manifest: dict[str, Any]) -> str | None:
    dependencies = manifest.get("dependencies")
    if not isinstance(dependencies, dict):
        return None
    value = dependencies.get("next")
    return value if isinstance(value, str) and value.strip() else None


def _successor(version: SemVer) -> SemVer:
    """Smallest version strictly above ``version``."""
    if version.prerelease:
        return make_semver(f"{version.version}.0", False)
    return make_semver(f"{version.major}.{version.minor}.{version.patch + 1}", False)


def min_version(version_range: str) -> Version | None:
    """Lowest version satisfying an npm range.

    Works like ``semver.minVersion``: ``None`` when the range cannot be parsed
    or no version satisfies it.
    """
    try:
        npm_range = make_range(version_range, False)
    except ValueError:
        return None
    if npm_range.test("0.0.0") or npm_range.test("0.0.0-0"):
        return 0, 0, 0

    minimum: SemVer | None = None
    for comparators in npm_range.set:
        set_minimum: SemVer | None = None
        for comparator in comparators:
            if comparator.semver is ANY or comparator.operator in ("<", "<="):
                continue
            bound = _successor(comparator.semver) if comparator.operator == ">" else comparator.semver
            if set_minimum is None or gt(bound, set_minimum, False):
                set_minimum = bound
        if set_minimum is not None and (minimum is None or gt(minimum, set_minimum, False)):
            minimum = set_minimum

    if minimum is None or not npm_range.test(minimum.version):
        return None
    return minimum.major, minimum.minor, minimum.patch


def async_request_api(major: int) -> bool | None:
    if major == 13:
        return False
    if major > 14:
        return True
    return None


def detect_async_request_api(project_root: Path) -> bool | None:
    manifest = read_manifest(project_root)
    if manifest is None:
        logger.debug("No %s under %s", PACKAGE_JSON, project_root)
        return None
    version_range = next_dependency_range(manifest)
    if version_range is None:
        return None
    minimum = min_version(version_range)
    if minimum is None:
        logger.debug("Unparsable or unsatisfiable next version range %r", version_range)
        return None
    logger.debug("next %r resolves to minimum %s", version_range, ".".join(map(str, minimum)))
    return async_request_api(minimum[0])
