from typing import Dict, Sequence

from .domain import KeyValueSource, MergeResult
from .logger import get_logger

logger = get_logger()


def merge(sources: Sequence[KeyValueSource]) -> MergeResult:
    """Merge sources with first-source-wins precedence.

    Primary sources are applied first, in order, then fallback sources in
    order. Keys that only a fallback source defines are reported in
    ``fallback_only_keys`` so the store can drop them from its output.
    """
    result = MergeResult()
    seen: Dict[str, None] = {}

    primaries = [s for s in sources if not s.is_fallback]
    fallbacks = [s for s in sources if s.is_fallback]

    for source in primaries:
        added = 0
        for key, value in source.items():
            if key not in result.merged:
                result.merged[key] = value
                added += 1
            seen.setdefault(key)
        logger.trace(f"merge primary '{source.origin}': {len(source)} keys, {added} new")

    for source in fallbacks:
        added = 0
        for key, value in source.items():
            if key not in result.merged:
                result.fallback_only_keys.add(key)
                result.merged[key] = value
                added += 1
            seen.setdefault(key)
        logger.trace(f"merge fallback '{source.origin}': {len(source)} keys, {added} new")

    result.key_universe = list(seen)
    return result
