"""
Library settings.

Each setting resolves in priority order:
1. Explicit argument (if not None)
2. Environment variable (ENV_AWARE_PROPS_*)
3. Default value
"""
import os
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from .resolver import DEFAULT_MAX_DEPTH
from .sources import DEFAULT_JPROPERTIES_NAME

ENV_PREFIX = "ENV_AWARE_PROPS_"


def resolve_setting(
    arg: Any,
    env_keys: Union[str, List[str]],
    default: Any,
    environ: Optional[Mapping[str, str]] = None
) -> Any:
    if arg is not None:
        return arg

    if isinstance(env_keys, str):
        env_keys = [env_keys]

    source = os.environ if environ is None else environ
    for key in env_keys:
        if key:
            val = source.get(key)
            if val is not None:
                return val

    return default

def resolve_bool(
    arg: Any,
    env_keys: Union[str, List[str]],
    default: bool,
    environ: Optional[Mapping[str, str]] = None
) -> bool:
    """Resolve boolean value with string conversion support."""
    val = resolve_setting(arg, env_keys, default, environ)

    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        return val.strip().lower() in ("true", "1", "yes", "on")
    return bool(val)

def resolve_int(
    arg: Any,
    env_keys: Union[str, List[str]],
    default: int,
    environ: Optional[Mapping[str, str]] = None
) -> int:
    """Resolve integer value. Unparsable values fall back to the default."""
    val = resolve_setting(arg, env_keys, default, environ)
    try:
        return int(val)
    except (ValueError, TypeError):
        return default


class ResolverSettings(BaseModel):
    """Settings for building a ResolvedStore."""
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, description="Maximum substitution passes before a value is treated as circular")
    enable_cwd_jproperties: bool = Field(default=True, description="Look up ./.jproperties as a fallback source")
    enable_home_jproperties: bool = Field(default=True, description="Look up ~/.jproperties as a fallback source")
    enable_root_jproperties: bool = Field(default=True, description="Look up /.jproperties as a fallback source")
    enable_environment: bool = Field(default=True, description="Use environment variables as a fallback source")
    enable_process_properties: bool = Field(default=True, description="Use process properties as a fallback source")
    jproperties_name: str = Field(default=DEFAULT_JPROPERTIES_NAME, description="File name of the optional .jproperties lookups")

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any
    ) -> 'ResolverSettings':
        """Build settings from explicit overrides, then ENV_AWARE_PROPS_* variables."""
        values = {}
        for name, field in cls.model_fields.items():
            env_key = f"{ENV_PREFIX}{name.upper()}"
            arg = overrides.get(name)
            if field.annotation is bool:
                values[name] = resolve_bool(arg, env_key, field.default, environ)
            elif field.annotation is int:
                values[name] = resolve_int(arg, env_key, field.default, environ)
            else:
                values[name] = resolve_setting(arg, env_key, field.default, environ)
        return cls(**values)
