"""Resolved configuration store."""

import threading
from collections import ChainMap
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from .domain import KeyValueSource, MergeResult
from .extractor import has_placeholder
from .logger import get_logger
from .merger import merge
from .resolver import DEFAULT_MAX_DEPTH, resolve
from .sensitive import mask_value

logger = get_logger()


class ResolvedStore(Mapping[str, Optional[str]]):
    """Flattened, placeholder-resolved view over an ordered list of sources.

    Resolution happens once, at construction. Values are indexed by the
    original key text even when the key itself contains placeholders: a source
    entry ``new_${A}=B`` is stored under ``new_${A}``, never under the
    resolved key name.

    Example:
        >>> store = ResolvedStore([
        ...     KeyValueSource.primary("app", {"url": "${host}:8080", "host": "localhost"}),
        ... ])
        >>> store.get("url")
        'localhost:8080'
    """

    def __init__(self, sources: Sequence[KeyValueSource] = (), max_depth: int = DEFAULT_MAX_DEPTH):
        self._lock = threading.Lock()
        self._max_depth = max_depth
        self._data: Dict[str, Optional[str]] = {}
        self._merged: Dict[str, Optional[str]] = {}
        with self._lock:
            self._build(sources)

    def _build(self, sources: Sequence[KeyValueSource]) -> None:
        merge_result: MergeResult = merge(sources)
        merged = merge_result.merged

        for key in merge_result.key_universe:
            resolved_key = resolve(key, merged, self._max_depth)
            if resolved_key != key:
                logger.trace(f"key '{key}' resolves to '{resolved_key}' (stored under original key)")
            self._data[key] = resolve(merged.get(key), merged, self._max_depth)

        for key in merge_result.fallback_only_keys:
            self._data.pop(key, None)

        self._merged = merged

        logger.debug(
            f"ResolvedStore built: sources={len(sources)} keys={len(self._data)} "
            f"fallback_keys_removed={len(merge_result.fallback_only_keys)}"
        )
        for key in self.unresolved_keys():
            logger.debug(f"  unresolved: {key} = {mask_value(key, self._data[key])}")

    @classmethod
    def _from_resolved(cls, data: Mapping[str, Optional[str]], max_depth: int) -> 'ResolvedStore':
        """Wrap already-resolved data without another resolution pass."""
        store = cls.__new__(cls)
        store._lock = threading.Lock()
        store._max_depth = max_depth
        store._data = dict(data)
        store._merged = dict(data)
        return store

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._data.get(key)
        return default if value is None else value

    def get_resolving(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a value where the key itself may contain placeholders.

        The key is resolved against the store and then the merged sources, so
        environment values stay reachable, e.g. ``get_resolving("${APP_KEY_NAME}")``.
        The value found is resolved once more before it is returned.
        """
        chain = ChainMap(self._data, self._merged)
        resolved_key = resolve(key, chain, self._max_depth)
        raw_value = chain.get(resolved_key)
        result = resolve(raw_value, chain, self._max_depth)
        if result is None:
            return default
        return result

    def partition(self, prefix: str) -> 'ResolvedStore':
        """Sub-store of the keys under ``prefix.``, with the prefix removed.

        Args:
            prefix: Key prefix. A trailing "." is appended when missing.

        Returns:
            A new independent store. Keys outside the prefix are dropped.
        """
        if not prefix.endswith("."):
            prefix = prefix + "."

        result: Dict[str, Optional[str]] = {}
        for key, value in self._data.items():
            if key.startswith(prefix):
                result[key[len(prefix):]] = value

        logger.trace(f"partition '{prefix}': {len(result)} of {len(self._data)} keys")
        return ResolvedStore._from_resolved(result, self._max_depth)

    def unresolved_keys(self) -> List[str]:
        """Keys whose values still hold ${...} tokens (missing targets or cycles)."""
        return [k for k, v in self._data.items() if has_placeholder(v)]

    def set(self, key: str, value: str) -> None:
        """Store a value verbatim. Other keys are not re-resolved."""
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> Optional[str]:
        with self._lock:
            self._merged.pop(key, None)
            return self._data.pop(key, None)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return dict(self._data)

    def __getitem__(self, key: str) -> Optional[str]:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        shown = {k: mask_value(k, v) for k, v in self._data.items()}
        return f"ResolvedStore({shown})"
