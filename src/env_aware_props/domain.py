"""Data models for env-aware-props."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from .validators import validate_entries


class SourceKind(Enum):
    PRIMARY = 'PRIMARY'
    FALLBACK = 'FALLBACK'


@dataclass(frozen=True)
class KeyValueSource:
    """An immutable set of key/value pairs from one origin.

    Primary sources surface their keys in the resolved output. Fallback sources
    (environment, process properties, .jproperties) only feed placeholder lookups.
    """
    origin: str
    entries: Mapping[str, Optional[str]] = field(default_factory=dict)
    kind: SourceKind = SourceKind.PRIMARY

    def __post_init__(self) -> None:
        copied = validate_entries(self.entries, self.origin)
        object.__setattr__(self, 'entries', MappingProxyType(copied))

    @classmethod
    def primary(cls, origin: str, entries: Mapping[str, Optional[str]]) -> 'KeyValueSource':
        return cls(origin=origin, entries=entries, kind=SourceKind.PRIMARY)

    @classmethod
    def fallback(cls, origin: str, entries: Mapping[str, Optional[str]]) -> 'KeyValueSource':
        return cls(origin=origin, entries=entries, kind=SourceKind.FALLBACK)

    @property
    def is_fallback(self) -> bool:
        return self.kind is SourceKind.FALLBACK

    def items(self) -> Iterator[Tuple[str, Optional[str]]]:
        return iter(self.entries.items())

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class MergeResult:
    merged: Dict[str, Optional[str]] = field(default_factory=dict)
    key_universe: List[str] = field(default_factory=list)
    fallback_only_keys: Set[str] = field(default_factory=set)


@dataclass
class LoadResult:
    sources_loaded: List[str] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    total_keys_loaded: int = 0
