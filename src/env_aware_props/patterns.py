import re

PATTERNS = {
    # ${name} where name is [A-Za-z0-9._-]+
    "PLACEHOLDER": re.compile(r'\$\{([a-zA-Z0-9._-]+)\}'),
}

PLACEHOLDER_START = "${"
PLACEHOLDER_END = "}"

def placeholder_token(name: str) -> str:
    """Build the literal ``${name}`` token for a key name."""
    return f"{PLACEHOLDER_START}{name}{PLACEHOLDER_END}"
