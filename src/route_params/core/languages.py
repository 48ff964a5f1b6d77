from pathlib import Path

_LANGUAGE_ALIASES = {
    "ts": "typescript",
    "typescript": "typescript",
    "tsx": "tsx",
    "typescriptreact": "tsx",
}

_EXTENSION_LANGUAGE_MAP = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

_SUPPORTED_LANGUAGES = set(_EXTENSION_LANGUAGE_MAP.values())

# Both grammars share node types, so they share one query family.
_QUERY_FAMILY = {
    "typescript": "typescript",
    "tsx": "typescript",
}


def normalize_language(language: str) -> str:
    normalized = language.strip().lower()
    resolved = _LANGUAGE_ALIASES.get(normalized, normalized)
    if resolved not in _SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language '{language}'. Supported: {sorted(_SUPPORTED_LANGUAGES)}")
    return resolved


def detect_language_from_path(file_path: Path) -> str:
    suffix = file_path.suffix.lower()
    if suffix in _EXTENSION_LANGUAGE_MAP:
        return _EXTENSION_LANGUAGE_MAP[suffix]
    raise ValueError(f"Unsupported file extension: {suffix}")


def is_supported_file(file_path: Path) -> bool:
    return file_path.suffix.lower() in _EXTENSION_LANGUAGE_MAP and not file_path.name.endswith(".d.ts")


def query_family(language: str) -> str:
    return _QUERY_FAMILY[normalize_language(language)]
