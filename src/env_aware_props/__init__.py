"""
env_aware_props - Layered properties with ${key} placeholder resolution
"""
from .domain import KeyValueSource, SourceKind, MergeResult, LoadResult
from .validators import (
    EnvAwarePropsError,
    InvalidSourceError,
    InvalidKeyFormatError,
    SourceLoadError,
    CircularReferenceError,
)
from .resolver import resolve, DEFAULT_MAX_DEPTH
from .extractor import extract_placeholders, has_placeholder
from .merger import merge
from .store import ResolvedStore
from .translators import (
    Translator,
    DefaultTranslator,
    HexTranslator,
    get_translator,
    from_environment,
    from_process_properties,
)
from .sources import (
    parse_properties,
    source_from_mapping,
    source_from_string,
    source_from_stream,
    source_from_file,
    source_from_resource,
    source_from_yaml_file,
    source_from_env_file,
    optional_file_source,
    jproperties_sources,
    environment_source,
    process_properties_source,
    get_process_properties,
    set_process_property,
    clear_process_property,
)
from .config import ResolverSettings
from .builder import (
    EnvAwarePropertiesBuilder,
    new_builder,
    from_paths,
    from_streams,
    from_resources,
    default_properties,
)
from .logger import EnvAwarePropsLogger, get_logger, set_log_level, get_log_level
from .sensitive import mask_value, set_log_mask

__all__ = [
    # Domain
    "KeyValueSource",
    "SourceKind",
    "MergeResult",
    "LoadResult",
    # Errors
    "EnvAwarePropsError",
    "InvalidSourceError",
    "InvalidKeyFormatError",
    "SourceLoadError",
    "CircularReferenceError",
    # Core
    "resolve",
    "DEFAULT_MAX_DEPTH",
    "extract_placeholders",
    "has_placeholder",
    "merge",
    "ResolvedStore",
    # Translators
    "Translator",
    "DefaultTranslator",
    "HexTranslator",
    "get_translator",
    "from_environment",
    "from_process_properties",
    # Sources
    "parse_properties",
    "source_from_mapping",
    "source_from_string",
    "source_from_stream",
    "source_from_file",
    "source_from_resource",
    "source_from_yaml_file",
    "source_from_env_file",
    "optional_file_source",
    "jproperties_sources",
    "environment_source",
    "process_properties_source",
    "get_process_properties",
    "set_process_property",
    "clear_process_property",
    # Builder
    "ResolverSettings",
    "EnvAwarePropertiesBuilder",
    "new_builder",
    "from_paths",
    "from_streams",
    "from_resources",
    "default_properties",
    # Logging
    "EnvAwarePropsLogger",
    "get_logger",
    "set_log_level",
    "get_log_level",
    "mask_value",
    "set_log_mask",
]
