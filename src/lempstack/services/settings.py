"""Structured model of a dotenv-style application settings file."""

import re
from dataclasses import dataclass
from typing import List, Optional

_ENTRY = re.compile(r"^(?P<comment>#\s*)?(?P<key>[A-Za-z_][A-Za-z0-9_]*)=(?P<value>.*)$")
_NEEDS_QUOTES = re.compile(r"[\s#\"'$]")


@dataclass
class _Line:
    raw: str
    key: Optional[str] = None
    value: Optional[str] = None
    commented: bool = False


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _quote(value: str) -> str:
    if value == "" or not _NEEDS_QUOTES.search(value):
        return value
    # Single quotes keep "$" literal; inside double quotes "${...}" is expanded.
    if "$" in value and "'" not in value:
        return f"'{value}'"
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")
    return f'"{escaped}"'


class EnvSettings:
    """Parses KEY=value lines while keeping comments, blank lines and ordering.

    Commented-out assignments (``# DB_HOST=127.0.0.1``) are tracked so that
    ``set`` can re-enable them in place instead of appending a duplicate.
    """

    def __init__(self, lines: List[_Line]):
        self._lines = lines

    @classmethod
    def parse(cls, text: str) -> "EnvSettings":
        lines: List[_Line] = []
        for raw in text.splitlines():
            match = _ENTRY.match(raw.strip())
            if not match:
                lines.append(_Line(raw=raw))
                continue
            lines.append(
                _Line(
                    raw=raw,
                    key=match.group("key"),
                    value=_unquote(match.group("value")),
                    commented=bool(match.group("comment")),
                )
            )
        return cls(lines)

    def _find(self, key: str, commented: bool) -> Optional[_Line]:
        for line in self._lines:
            if line.key == key and line.commented == commented:
                return line
        return None

    def keys(self) -> List[str]:
        return [line.key for line in self._lines if line.key and not line.commented]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        line = self._find(key, commented=False)
        return line.value if line else default

    def set(self, key: str, value: str) -> str:
        line = self._find(key, commented=False)
        if line:
            line.value = value
            line.raw = f"{key}={_quote(value)}"
            return "updated"

        line = self._find(key, commented=True)
        if line:
            line.value = value
            line.commented = False
            line.raw = f"{key}={_quote(value)}"
            return "uncommented"

        self._lines.append(_Line(raw=f"{key}={_quote(value)}", key=key, value=value))
        return "appended"

    def serialize(self) -> str:
        return "\n".join(line.raw for line in self._lines) + "\n"
