"""
Masking of property values before they are written to the log.

A value is hidden when its key names a secret (``db.password``, ``api.key``,
``AUTH_TOKEN``...) or when the value itself looks like a credential. Set
ENV_AWARE_PROPS_LOG_MASK=false, or call set_log_mask(False), to log values
as they are.
"""
import os
import re
from typing import Any, Optional

SENSITIVE_KEY_PATTERN = re.compile(
    r'KEY|SECRET|PASSWORD|PASSWD|TOKEN|CREDENTIAL|AUTH|PRIVATE',
    re.IGNORECASE
)

SENSITIVE_VALUE_PREFIXES = ('sk-', 'pk-', 'Bearer ', 'Basic ', 'eyJ')

_MASKED = '[REDACTED]'
_MISSING = '[UNDEFINED]'

_log_mask = os.getenv('ENV_AWARE_PROPS_LOG_MASK', '').lower() != 'false'


def set_log_mask(enabled: bool) -> None:
    global _log_mask
    _log_mask = enabled

def is_sensitive_key(key: str) -> bool:
    return bool(SENSITIVE_KEY_PATTERN.search(key))

def is_sensitive_value(value: str) -> bool:
    return bool(value) and value.startswith(SENSITIVE_VALUE_PREFIXES)

def mask_value(key: str, value: Optional[Any]) -> str:
    """Text to log for ``key = value``."""
    if value is None:
        return _MISSING

    text = str(value)
    if not _log_mask or not text:
        return text
    if is_sensitive_key(key) or is_sensitive_value(text):
        return _MASKED
    return text
