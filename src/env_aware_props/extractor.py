from typing import List, Dict, Any, Optional
from .patterns import PATTERNS

def extract_placeholders(template: Optional[str]) -> List[Dict[str, Any]]:
    """Extract all well-formed ${name} placeholders from a string."""
    if not template:
        return []

    placeholders = []
    for match in PATTERNS["PLACEHOLDER"].finditer(template):
        placeholders.append({
            "raw": match.group(0),
            "name": match.group(1),
            "start": match.start(),
            "end": match.end(),
        })

    return placeholders

def has_placeholder(value: Optional[str]) -> bool:
    if not value:
        return False
    return bool(PATTERNS["PLACEHOLDER"].search(value))
