"""Credentials file creation and parsing."""

import os
import re
from typing import Dict, Tuple

from lempstack.constants import DEFAULT_CREDENTIALS
from lempstack.errors import BootstrapError
from lempstack.errors_catalog import actionable_error
from lempstack.models import Credentials

_ASSIGNMENT = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)=(.*)$")
_INLINE_COMMENT = re.compile(r"\s+#")


class CredentialsService:
    """Creates the credentials record once and loads it into a Credentials value."""

    REQUIRED_KEYS: Tuple[str, ...] = tuple(key for key, _ in DEFAULT_CREDENTIALS)

    def __init__(self, logger, console):
        self.logger = logger
        self.console = console

    @staticmethod
    def render_defaults() -> str:
        lines = ["# Database Configuration"]
        lines.extend(f"{key}={value}" for key, value in DEFAULT_CREDENTIALS)
        return "\n".join(lines) + "\n"

    def ensure(self, path: str) -> bool:
        if os.path.exists(path):
            self.console.print("[dim]Using existing .env file[/dim]")
            self.logger.info("Using existing credentials file: %s", path)
            return False

        try:
            with open(path, "w", encoding="utf-8", newline="\n") as file_obj:
                file_obj.write(self.render_defaults())
        except OSError as exc:
            raise BootstrapError(f"Could not create credentials file '{path}': {exc}") from exc

        self.console.print("[green]Created .env file with default credentials[/green]")
        self.logger.info("Created credentials file with defaults: %s", path)
        return True

    def parse(self, text: str, path: str = "<string>") -> Dict[str, str]:
        values: Dict[str, str] = {}
        for line_no, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            match = _ASSIGNMENT.match(line)
            if not match:
                raise BootstrapError(
                    actionable_error(
                        "credentials_malformed",
                        line_no=str(line_no),
                        path=path,
                        line=raw_line,
                    )
                )

            values[match.group(1)] = self._parse_value(match.group(2))
        return values

    @staticmethod
    def _parse_value(raw_value: str) -> str:
        value = raw_value.strip()
        if value[:1] in ("'", '"'):
            end = value.find(value[0], 1)
            if end != -1:
                rest = value[end + 1 :]
                if not rest or _INLINE_COMMENT.match(rest):
                    return value[1:end]
            return value
        # Like the shell, "#" starts a comment only after whitespace.
        return _INLINE_COMMENT.split(value, maxsplit=1)[0].rstrip()

    def load(self, path: str) -> Credentials:
        try:
            with open(path, "r", encoding="utf-8") as file_obj:
                text = file_obj.read()
        except OSError as exc:
            raise BootstrapError(f"Could not read credentials file '{path}': {exc}") from exc

        values = self.parse(text, path=path)
        missing = [key for key in self.REQUIRED_KEYS if key not in values]
        if missing:
            raise BootstrapError(
                actionable_error("credentials_missing_key", path=path, keys=", ".join(missing))
            )

        self.logger.debug("Loaded credentials for database '%s'", values["DB_DATABASE"])
        return Credentials.from_mapping(values)
