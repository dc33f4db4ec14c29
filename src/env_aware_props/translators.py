"""
Translate prefixed environment / process-property names into config keys.

Two flavors:
    default: ENV_DATABASE_URL -> database.url, ENV_DATABASE__URL -> database_url
    hex:     ENV_6D792E6B6579 -> my.key
"""
import os
import string
from typing import Dict, Mapping, Optional, Protocol, Union, runtime_checkable

from .logger import get_logger
from .sources import get_process_properties
from .validators import InvalidKeyFormatError

logger = get_logger()

# Marks a collapsed "__" while single "_" become dots
_UNDERSCORE_MARK = "\u0000"


@runtime_checkable
class Translator(Protocol):
    def translate(self, key: str, prefix: str) -> Optional[str]: ...


class DefaultTranslator:
    def translate(self, key: str, prefix: str) -> Optional[str]:
        if not key.startswith(prefix):
            return None
        trimmed = key[len(prefix):]

        trimmed = trimmed.replace("__", _UNDERSCORE_MARK)
        trimmed = trimmed.replace("_", ".")
        trimmed = trimmed.replace(_UNDERSCORE_MARK, "_")

        return trimmed.lower()


class HexTranslator:
    def translate(self, key: str, prefix: str) -> Optional[str]:
        if not key.startswith(prefix):
            return None
        return hex_to_string(key[len(prefix):])


def hex_to_string(hex_str: str) -> str:
    """Decode pairs of hex digits, one code point (0-255) per pair."""
    if len(hex_str) % 2 != 0:
        raise InvalidKeyFormatError(hex_str, "hex string must have an even length")

    chars = []
    for i in range(0, len(hex_str), 2):
        pair = hex_str[i:i + 2]
        if not all(c in string.hexdigits for c in pair):
            raise InvalidKeyFormatError(hex_str, f"'{pair}' is not a hex byte")
        chars.append(chr(int(pair, 16)))
    return "".join(chars)


TRANSLATORS = {
    "default": DefaultTranslator,
    "hex": HexTranslator,
}

TranslatorSpec = Union[str, Translator, None]


def get_translator(flavor: TranslatorSpec = None) -> Translator:
    """Pick a translator by flavor name. Unknown flavors use the default."""
    if flavor is None:
        return DefaultTranslator()
    # str has a translate() of its own, check it before the protocol
    if not isinstance(flavor, str):
        if not isinstance(flavor, Translator):
            raise TypeError(f"translator must be a flavor name or have translate(key, prefix), got {type(flavor).__name__}")
        return flavor

    translator_cls = TRANSLATORS.get(flavor.lower())
    if translator_cls is None:
        logger.debug(f"Unknown translator flavor '{flavor}', using default")
        translator_cls = DefaultTranslator
    return translator_cls()


def translate_all(entries: Mapping[str, str], prefix: str, translator: TranslatorSpec = None) -> Dict[str, str]:
    trans = get_translator(translator)
    result: Dict[str, str] = {}
    for key, value in entries.items():
        translated = trans.translate(key, prefix)
        if translated is not None:
            result[translated] = value
    return result


def from_environment(
    prefix: str,
    translator: TranslatorSpec = None,
    environ: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Config keys from environment variables that start with ``prefix``."""
    source = os.environ if environ is None else environ
    result = translate_all(source, prefix, translator)
    logger.debug(f"from_environment('{prefix}'): {len(result)} keys")
    return result


def from_process_properties(
    prefix: str,
    translator: TranslatorSpec = None,
    properties: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Config keys from process properties whose names start with ``prefix``."""
    if properties is None:
        properties = get_process_properties()
    result = translate_all(properties, prefix, translator)
    logger.debug(f"from_process_properties('{prefix}'): {len(result)} keys")
    return result
