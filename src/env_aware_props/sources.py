"""
Source collaborators.

Everything that turns bytes, files or process state into a KeyValueSource.
Properties text follows the java.util.Properties format and is parsed with
javaproperties: ``=``, ``:`` or whitespace separators, ``#`` and ``!``
comments, backslash line continuations and ``\\uXXXX`` escapes. Byte input
defaults to ISO-8859-1. ``.env`` files are read with python-dotenv.
Neither parser interpolates, so ${...} tokens reach the resolver untouched.
"""
import getpass
import os
import platform
import sys
import threading
from importlib import resources
from typing import Any, Dict, IO, List, Mapping, Optional, Union

import javaproperties
import yaml
from dotenv import dotenv_values

from .domain import KeyValueSource, SourceKind
from .logger import get_logger
from .sensitive import mask_value
from .validators import InvalidSourceError, SourceLoadError

logger = get_logger()

PathLike = Union[str, "os.PathLike[str]"]

DEFAULT_JPROPERTIES_NAME = ".jproperties"

PROPERTIES_ENCODING = "iso-8859-1"


# --- Properties text ---

def parse_properties(content: str) -> Dict[str, str]:
    """Parse .properties text. A key with no separator maps to ''."""
    return dict(javaproperties.loads(content))


def source_from_mapping(
    mapping: Mapping[Any, Any],
    origin: str = "mapping",
    kind: SourceKind = SourceKind.PRIMARY
) -> KeyValueSource:
    return KeyValueSource(origin=origin, entries=mapping, kind=kind)


def source_from_string(
    content: str,
    origin: str = "string",
    kind: SourceKind = SourceKind.PRIMARY
) -> KeyValueSource:
    try:
        entries = parse_properties(content)
    except ValueError as e:
        raise SourceLoadError(origin, e)
    return KeyValueSource(origin=origin, entries=entries, kind=kind)


def source_from_stream(
    stream: IO[Any],
    origin: Optional[str] = None,
    encoding: str = PROPERTIES_ENCODING,
    kind: SourceKind = SourceKind.PRIMARY
) -> KeyValueSource:
    """Read a text or binary stream. The stream is not closed."""
    origin = origin or f"stream:{getattr(stream, 'name', type(stream).__name__)}"
    try:
        content = stream.read()
        if isinstance(content, bytes):
            content = content.decode(encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(origin, e)
    return source_from_string(content, origin=origin, kind=kind)


def source_from_file(
    path: PathLike,
    encoding: str = PROPERTIES_ENCODING,
    kind: SourceKind = SourceKind.PRIMARY
) -> KeyValueSource:
    origin = f"file:{os.fspath(path)}"
    logger.debug(f"Loading file: {os.fspath(path)}")
    try:
        with open(path, "r", encoding=encoding) as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"  status: FAILED ({e})")
        raise SourceLoadError(origin, e)

    source = source_from_string(content, origin=origin, kind=kind)
    logger.debug(f"  status: SUCCESS")
    logger.debug(f"  keys_loaded: {len(source)}")
    logger.trace(f"  keys: {list(source.entries.keys())}")
    return source


def source_from_resource(
    spec: str,
    encoding: str = PROPERTIES_ENCODING,
    kind: SourceKind = SourceKind.PRIMARY
) -> KeyValueSource:
    """Load a properties resource shipped inside a package.

    Args:
        spec: ``"package.name:path/inside/package.properties"``
    """
    package, sep, name = spec.partition(":")
    if not sep or not package or not name:
        raise InvalidSourceError(f"Resource spec must look like 'package:path', got '{spec}'")

    origin = f"resource:{spec}"
    try:
        content = resources.files(package).joinpath(name.lstrip("/")).read_text(encoding=encoding)
    except (ImportError, OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(origin, e)
    return source_from_string(content, origin=origin, kind=kind)


# --- .env files ---

def source_from_env_file(
    path: PathLike,
    encoding: str = "utf-8",
    kind: SourceKind = SourceKind.FALLBACK
) -> KeyValueSource:
    """Load a dotenv file (KEY=value, optional quotes, ``export`` prefix).

    Names are kept as written, so ``${DB_HOST}`` placeholders can reach them the
    same way they reach real environment variables. Variables declared without
    a value are dropped.
    """
    origin = f"env:{os.fspath(path)}"
    if not os.path.isfile(path):
        raise SourceLoadError(origin, FileNotFoundError(os.fspath(path)))

    logger.debug(f"Loading env file: {os.fspath(path)}")
    try:
        parsed = dotenv_values(path, interpolate=False, encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(origin, e)

    entries = {key: value for key, value in parsed.items() if value is not None}
    for key, value in entries.items():
        logger.trace(f"  {key} = {mask_value(key, value)}")
    return KeyValueSource(origin=origin, entries=entries, kind=kind)


# --- YAML ---

def flatten_mapping(obj: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """
    Flatten nested mappings into dotted keys.
    Example: { "database": { "host": "localhost" } } => { "database.host": "localhost" }
    """
    result: Dict[str, str] = {}

    for key, value in obj.items():
        new_key = f"{prefix}.{key}" if prefix else str(key)

        if value is None:
            continue
        elif isinstance(value, Mapping):
            result.update(flatten_mapping(value, new_key))
        elif isinstance(value, list):
            for index, item in enumerate(value):
                item_key = f"{new_key}.{index}"
                if isinstance(item, Mapping):
                    result.update(flatten_mapping(item, item_key))
                elif item is not None:
                    result[item_key] = _scalar_to_string(item)
        else:
            result[new_key] = _scalar_to_string(value)

    return result


def _scalar_to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def source_from_yaml_file(
    path: PathLike,
    encoding: str = "utf-8",
    kind: SourceKind = SourceKind.PRIMARY
) -> KeyValueSource:
    origin = f"yaml:{os.fspath(path)}"
    try:
        with open(path, "r", encoding=encoding) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SourceLoadError(origin, e, message=f"YAML parsing error in {os.fspath(path)}: {e}")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(origin, e)

    if not isinstance(data, Mapping):
        raise SourceLoadError(origin, message=f"YAML content must be an object: {os.fspath(path)}")

    return KeyValueSource(origin=origin, entries=flatten_mapping(data), kind=kind)


# --- Optional .jproperties lookups ---

def optional_file_source(
    path: PathLike,
    kind: SourceKind = SourceKind.FALLBACK
) -> KeyValueSource:
    """Load ``path`` if it is a readable, non-empty file, else an empty source."""
    origin = f"file:{os.fspath(path)}"
    if not (os.path.isfile(path) and os.access(path, os.R_OK) and os.path.getsize(path) > 0):
        logger.trace(f"Optional file not present: {os.fspath(path)}")
        return KeyValueSource(origin=origin, kind=kind)

    try:
        return source_from_file(path, kind=kind)
    except SourceLoadError as e:
        logger.warn(f"Skipping optional file {os.fspath(path)}: {e.cause}")
        return KeyValueSource(origin=origin, kind=kind)


def jproperties_sources(
    cwd: bool = True,
    home: bool = True,
    root: bool = True,
    name: str = DEFAULT_JPROPERTIES_NAME
) -> List[KeyValueSource]:
    """Fallback sources from ./<name>, ~/<name> and /<name>, in that order."""
    paths = []
    if cwd:
        paths.append(os.path.join(os.getcwd(), name))
    if home:
        paths.append(os.path.join(os.path.expanduser("~"), name))
    if root:
        paths.append(os.path.join(os.path.abspath(os.sep), name))
    return [optional_file_source(p) for p in paths]


# --- Process properties ---

_process_properties: Dict[str, str] = {}
_process_properties_lock = threading.Lock()


def _interpreter_properties() -> Dict[str, str]:
    try:
        user_name = getpass.getuser()
    except (OSError, KeyError):
        user_name = ""
    return {
        "user.name": user_name,
        "user.home": os.path.expanduser("~"),
        "user.dir": os.getcwd(),
        "os.name": platform.system(),
        "os.arch": platform.machine(),
        "os.version": platform.release(),
        "python.version": platform.python_version(),
        "python.executable": sys.executable or "",
        "file.separator": os.sep,
        "path.separator": os.pathsep,
        "line.separator": os.linesep,
    }


def get_process_properties() -> Dict[str, str]:
    """Snapshot of interpreter facts overlaid with registered properties."""
    properties = _interpreter_properties()
    with _process_properties_lock:
        properties.update(_process_properties)
    return properties


def set_process_property(key: str, value: str) -> None:
    if not isinstance(key, str) or not isinstance(value, str):
        raise InvalidSourceError("Process properties must be string -> string")
    with _process_properties_lock:
        _process_properties[key] = value
    logger.trace(f"process property set: {key} = {mask_value(key, value)}")


def clear_process_property(key: str) -> Optional[str]:
    with _process_properties_lock:
        return _process_properties.pop(key, None)


def process_properties_source(properties: Optional[Mapping[str, str]] = None) -> KeyValueSource:
    entries = get_process_properties() if properties is None else properties
    return KeyValueSource(origin="process-properties", entries=entries, kind=SourceKind.FALLBACK)


def environment_source(environ: Optional[Mapping[str, str]] = None) -> KeyValueSource:
    entries = dict(os.environ) if environ is None else environ
    return KeyValueSource(origin="environment", entries=entries, kind=SourceKind.FALLBACK)
