"""
Placeholder resolution.

Substitutes ``${name}`` tokens pass after pass until the string stops changing
or the depth limit is reached. Hitting the limit is treated as a circular
reference and the untouched input is handed back.
"""
from typing import Callable, Mapping, Optional, Union

from .logger import get_logger
from .patterns import PATTERNS, placeholder_token
from .validators import CircularReferenceError

logger = get_logger()

DEFAULT_MAX_DEPTH = 500

Getter = Callable[[str], Optional[str]]
Lookup = Union[Mapping[str, Optional[str]], Getter]


def as_getter(lookup: Lookup) -> Getter:
    """Normalize a mapping or a callable into a ``key -> value`` function."""
    if isinstance(lookup, Mapping):
        return lookup.get
    if callable(lookup):
        return lookup
    raise TypeError(f"lookup must be a mapping or a callable, got {type(lookup).__name__}")


def substitute_once(raw: str, getter: Getter) -> str:
    """Run a single substitution pass over ``raw``.

    Every found name replaces all literal occurrences of its token, so one
    pass also rewrites tokens introduced by earlier replacements in the pass.
    """
    result = raw
    for match in PATTERNS["PLACEHOLDER"].finditer(raw):
        name = match.group(1)
        value = getter(name)
        if value is not None:
            result = result.replace(placeholder_token(name), value)
    return result


def resolve_or_raise(raw: str, getter: Getter, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Iterate substitution passes to a fixed point.

    Raises CircularReferenceError when ``max_depth`` passes all changed the string.
    """
    current = raw
    for _ in range(max_depth):
        result = substitute_once(current, getter)
        if result == current:
            return result
        current = result
    raise CircularReferenceError(raw, max_depth)


def resolve(raw: Optional[str], lookup: Lookup, max_depth: int = DEFAULT_MAX_DEPTH) -> Optional[str]:
    """
    Resolve ${name} placeholders in ``raw`` against ``lookup``.

    Args:
        raw: The string to resolve. None is passed through.
        lookup: A mapping or a ``key -> value`` callable. Missing keys and None
            values leave the placeholder untouched.
        max_depth: Maximum number of substitution passes.

    Returns:
        The resolved string, or ``raw`` unchanged when a circular reference
        was detected.
    """
    if max_depth < 1:
        raise ValueError(f"max_depth must be >= 1, got {max_depth}")
    if raw is None:
        return None

    try:
        return resolve_or_raise(raw, as_getter(lookup), max_depth)
    except CircularReferenceError as e:
        logger.debug(f"Circular reference, keeping original text: {e}")
        return raw
