"""
Fluent construction of a ResolvedStore.

Chain order (earliest wins):
    overrides -> added sources (in order) -> .jproperties (cwd, home, root)
    -> process properties -> environment

Only the overrides and the added sources surface as keys. The rest are
fallbacks that only feed placeholder lookups.
"""
import os
from typing import Any, Callable, Dict, IO, List, Mapping, Optional, Sequence

from .config import ResolverSettings
from .domain import KeyValueSource, LoadResult
from .logger import get_logger
from .sources import (
    PathLike,
    environment_source,
    jproperties_sources,
    process_properties_source,
    source_from_env_file,
    source_from_file,
    source_from_mapping,
    source_from_resource,
    source_from_stream,
    source_from_yaml_file,
)
from .store import ResolvedStore
from .validators import EnvAwarePropsError, InvalidSourceError, SourceLoadError

logger = get_logger()

SourceFactory = Callable[[], KeyValueSource]

DEFAULT_CANDIDATES = ("./config/application.properties", "./application.properties")


class EnvAwarePropertiesBuilder:
    def __init__(self, settings: Optional[ResolverSettings] = None):
        self._settings = settings if settings is not None else ResolverSettings.from_env()
        self._overrides: Dict[str, str] = {}
        self._targets: List[SourceFactory] = []
        self._environ: Optional[Mapping[str, str]] = None
        self._process_properties: Optional[Mapping[str, str]] = None
        self._load_result: Optional[LoadResult] = None

    @property
    def settings(self) -> ResolverSettings:
        return self._settings

    def _update(self, **changes: Any) -> 'EnvAwarePropertiesBuilder':
        self._settings = self._settings.model_copy(update=changes)
        return self

    # --- Overrides ---

    def override(self, key: str, value: str) -> 'EnvAwarePropertiesBuilder':
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidSourceError("Overrides must be string -> string")
        self._overrides[key] = value
        return self

    def delete_override(self, key: str) -> 'EnvAwarePropertiesBuilder':
        self._overrides.pop(key, None)
        return self

    def clear_overrides(self) -> 'EnvAwarePropertiesBuilder':
        self._overrides.clear()
        return self

    # --- Primary sources ---

    def then_add_file(self, *paths: PathLike) -> 'EnvAwarePropertiesBuilder':
        for path in paths:
            self._targets.append(lambda p=path: source_from_file(p))
        return self

    def then_add_stream(self, *streams: IO[Any]) -> 'EnvAwarePropertiesBuilder':
        for stream in streams:
            if stream is None:
                raise InvalidSourceError("Null stream received")
            self._targets.append(lambda s=stream: source_from_stream(s))
        return self

    def then_add_mapping(self, *mappings: Mapping[str, str]) -> 'EnvAwarePropertiesBuilder':
        for mapping in mappings:
            # Validate now so a bad mapping fails at the call site
            source = source_from_mapping(mapping, origin=f"mapping:{len(self._targets)}")
            self._targets.append(lambda s=source: s)
        return self

    def then_add_resource(self, *specs: str) -> 'EnvAwarePropertiesBuilder':
        for spec in specs:
            self._targets.append(lambda r=spec: source_from_resource(r))
        return self

    def then_add_yaml_file(self, *paths: PathLike) -> 'EnvAwarePropertiesBuilder':
        for path in paths:
            self._targets.append(lambda p=path: source_from_yaml_file(p))
        return self

    def then_add_env_file(self, *paths: PathLike) -> 'EnvAwarePropertiesBuilder':
        """Add .env files. Their variables feed placeholders but are not surfaced as keys."""
        for path in paths:
            self._targets.append(lambda p=path: source_from_env_file(p))
        return self

    def then_add_source(self, *sources: KeyValueSource) -> 'EnvAwarePropertiesBuilder':
        for source in sources:
            if not isinstance(source, KeyValueSource):
                raise InvalidSourceError(f"Not sure how to deal with target of type {type(source).__name__}")
            self._targets.append(lambda s=source: s)
        return self

    def remove_all(self) -> 'EnvAwarePropertiesBuilder':
        """Drop every added source, keeping the overrides."""
        self._targets.clear()
        return self

    # --- Fallback toggles ---

    def enable_cwd_jproperties(self) -> 'EnvAwarePropertiesBuilder':
        return self._update(enable_cwd_jproperties=True)

    def disable_cwd_jproperties(self) -> 'EnvAwarePropertiesBuilder':
        return self._update(enable_cwd_jproperties=False)

    def enable_home_jproperties(self) -> 'EnvAwarePropertiesBuilder':
        return self._update(enable_home_jproperties=True)

    def disable_home_jproperties(self) -> 'EnvAwarePropertiesBuilder':
        return self._update(enable_home_jproperties=False)

    def enable_root_jproperties(self) -> 'EnvAwarePropertiesBuilder':
        return self._update(enable_root_jproperties=True)

    def disable_root_jproperties(self) -> 'EnvAwarePropertiesBuilder':
        return self._update(enable_root_jproperties=False)

    def enable_all_jproperties(self) -> 'EnvAwarePropertiesBuilder':
        return self.enable_cwd_jproperties().enable_home_jproperties().enable_root_jproperties()

    def disable_all_jproperties(self) -> 'EnvAwarePropertiesBuilder':
        return self.disable_cwd_jproperties().disable_home_jproperties().disable_root_jproperties()

    def enable_environment(self) -> 'EnvAwarePropertiesBuilder':
        return self._update(enable_environment=True)

    def disable_environment(self) -> 'EnvAwarePropertiesBuilder':
        return self._update(enable_environment=False)

    def enable_process_properties(self) -> 'EnvAwarePropertiesBuilder':
        return self._update(enable_process_properties=True)

    def disable_process_properties(self) -> 'EnvAwarePropertiesBuilder':
        return self._update(enable_process_properties=False)

    def with_max_depth(self, max_depth: int) -> 'EnvAwarePropertiesBuilder':
        self._settings = ResolverSettings(**{**self._settings.model_dump(), "max_depth": max_depth})
        return self

    # --- Injection ---

    def with_environment(self, environ: Mapping[str, str]) -> 'EnvAwarePropertiesBuilder':
        """Use ``environ`` instead of os.environ for the environment fallback."""
        self._environ = environ
        return self

    def with_process_properties(self, properties: Mapping[str, str]) -> 'EnvAwarePropertiesBuilder':
        self._process_properties = properties
        return self

    # --- Build ---

    def _fallback_sources(self) -> List[KeyValueSource]:
        s = self._settings
        fallbacks = jproperties_sources(
            cwd=s.enable_cwd_jproperties,
            home=s.enable_home_jproperties,
            root=s.enable_root_jproperties,
            name=s.jproperties_name,
        )
        if s.enable_process_properties:
            fallbacks.append(process_properties_source(self._process_properties))
        if s.enable_environment:
            fallbacks.append(environment_source(self._environ))
        return fallbacks

    def build(self) -> ResolvedStore:
        result = LoadResult()
        self._load_result = result
        sources: List[KeyValueSource] = [source_from_mapping(self._overrides, origin="overrides")]

        for factory in self._targets:
            try:
                source = factory()
            except EnvAwarePropsError as e:
                result.errors.append({"error": str(e)})
                logger.error(f"Failed to load source: {e}")
                raise
            sources.append(source)
            result.sources_loaded.append(source.origin)
            result.total_keys_loaded += len(source)

        sources.extend(self._fallback_sources())

        fallback_count = sum(1 for s in sources if s.is_fallback)
        logger.info(
            f"Building store: primary_sources={len(sources) - fallback_count} "
            f"fallback_sources={fallback_count} "
            f"max_depth={self._settings.max_depth}"
        )
        return ResolvedStore(sources, max_depth=self._settings.max_depth)

    def get_load_result(self) -> Optional[LoadResult]:
        return self._load_result


def new_builder(settings: Optional[ResolverSettings] = None) -> EnvAwarePropertiesBuilder:
    return EnvAwarePropertiesBuilder(settings)


def _require_inputs(inputs: Sequence[Any]) -> None:
    if not inputs:
        raise InvalidSourceError("None of the inputs are valid!")


def from_paths(*paths: PathLike, settings: Optional[ResolverSettings] = None) -> ResolvedStore:
    """Store over properties files, earlier paths taking precedence."""
    _require_inputs(paths)
    return new_builder(settings).then_add_file(*paths).build()


def from_streams(*streams: IO[Any], settings: Optional[ResolverSettings] = None) -> ResolvedStore:
    _require_inputs(streams)
    return new_builder(settings).then_add_stream(*streams).build()


def from_resources(*specs: str, settings: Optional[ResolverSettings] = None) -> ResolvedStore:
    _require_inputs(specs)
    return new_builder(settings).then_add_resource(*specs).build()


def default_properties(
    candidates: Sequence[PathLike] = DEFAULT_CANDIDATES,
    settings: Optional[ResolverSettings] = None
) -> ResolvedStore:
    """Load the first candidate file that exists.

    By default ./config/application.properties, then ./application.properties.
    """
    for candidate in candidates:
        if not os.path.isfile(candidate):
            logger.debug(f"Default properties candidate not found: {os.fspath(candidate)}")
            continue
        try:
            return new_builder(settings).then_add_file(candidate).build()
        except SourceLoadError as e:
            logger.warn(f"Default properties candidate failed: {e}")

    names = " and ".join(os.fspath(c) for c in candidates)
    raise SourceLoadError(
        "default",
        message=f"None of {names} exists. (cwd = {os.getcwd()})"
    )
