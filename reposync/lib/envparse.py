"""
Parser for reposync.env files and REPOSYNC_* environment overrides.

Values are read literally: nothing is expanded or executed. Because
GIT_BINARY and the directory settings end up in command lines and paths,
values that look like shell constructs are rejected outright.
"""

import re
from pathlib import Path
from typing import Mapping

# backticks, $( ), ${ }, ;, &&, || and |
FORBIDDEN_VALUE = re.compile(r'`|\$\(|\$\{|;|&&|\|')

KEY_PATTERN = re.compile(r'^[A-Z][A-Z0-9_]*$')

QUOTES = ('"', "'")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def _check_value(value: str, where: str) -> None:
    if FORBIDDEN_VALUE.search(value):
        raise ValueError(f"{where}: Forbidden pattern in value")


def parse_line(line: str, lineno: int) -> tuple[str, str] | None:
    """Parse one KEY=value line. Blank lines and comments give None."""
    line = line.strip()
    if not line or line.startswith('#'):
        return None
    if line.startswith('export '):
        line = line[len('export '):].lstrip()

    key, sep, value = line.partition('=')
    if not sep:
        raise ValueError(f"Line {lineno}: Invalid syntax (no '=')")
    key = key.strip()
    if not KEY_PATTERN.match(key):
        raise ValueError(f"Line {lineno}: Invalid key '{key}'")

    value = _unquote(value.strip())
    _check_value(value, f"Line {lineno}")
    return key, value


def load_env(filepath: str) -> dict:
    """
    Read a reposync.env file into a dict. Later lines override earlier ones.

    Raises:
        FileNotFoundError: if file doesn't exist
        ValueError: if syntax invalid or forbidden pattern found
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Env file not found: {filepath}")

    result = {}
    for lineno, line in enumerate(path.read_text().splitlines(), 1):
        parsed = parse_line(line, lineno)
        if parsed is not None:
            key, value = parsed
            result[key] = value
    return result


def overrides_from_environ(environ: Mapping[str, str], prefix: str) -> dict:
    """
    Collect PREFIX_KEY=value pairs from a process environment as KEY=value.

    Values go through the same forbidden-pattern check as file values.
    """
    result = {}
    for name, value in environ.items():
        if not name.startswith(prefix):
            continue
        key = name[len(prefix):]
        if not KEY_PATTERN.match(key):
            continue
        _check_value(value, f"Environment variable {name}")
        result[key] = value
    return result
