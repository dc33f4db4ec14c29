from typing import Any, Dict, Mapping, Optional


class EnvAwarePropsError(Exception):
    """Base exception for env-aware-props."""
    pass

class InvalidSourceError(EnvAwarePropsError, ValueError):
    """A source is structurally invalid (wrong entry types, nothing to load)."""
    pass

class InvalidKeyFormatError(EnvAwarePropsError, ValueError):
    """An environment or property name cannot be translated into a key."""
    def __init__(self, key: str, reason: str):
        super().__init__(f"Invalid key '{key}': {reason}")
        self.key = key
        self.reason = reason

class SourceLoadError(EnvAwarePropsError):
    def __init__(self, origin: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        msg = message or f"Failed to load source '{origin}': {cause}"
        super().__init__(msg)
        self.origin = origin
        self.cause = cause

class CircularReferenceError(EnvAwarePropsError):
    """Raised by the resolution loop when the depth limit is hit.

    Always caught inside ``resolve``; callers only ever see the original text.
    """
    def __init__(self, raw: str, max_depth: int):
        super().__init__(f"Possible resolution loop after {max_depth} passes: {raw!r}")
        self.raw = raw
        self.max_depth = max_depth


def validate_entries(entries: Mapping[Any, Any], origin: str) -> Dict[str, Optional[str]]:
    """Check that a mapping is str -> str (or None) and return a plain copy."""
    if not isinstance(entries, Mapping):
        raise InvalidSourceError(
            f"Source '{origin}' must be a mapping. Found {type(entries).__name__}"
        )

    result: Dict[str, Optional[str]] = {}
    for key, value in entries.items():
        if not isinstance(key, str) or not (value is None or isinstance(value, str)):
            raise InvalidSourceError(
                f"Source '{origin}' must be string -> string. "
                f"Found {type(key).__name__} -> {type(value).__name__} for key {key!r}"
            )
        result[key] = value
    return result
