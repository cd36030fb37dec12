"""Actionable error catalog for lempstack."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "compose_not_found": {
        "what": "Docker Compose is not available.",
        "next": "Install Docker Compose v2 (`docker compose`) or v1 (`docker-compose`) and try again.",
    },
    "command_not_found": {
        "what": "Required command not found: {command}.",
        "next": "Install it and make sure it is on PATH.",
    },
    "credentials_malformed": {
        "what": "Malformed line {line_no} in credentials file {path}: {line}",
        "next": "Use one `KEY=value` assignment per line, or delete the file to regenerate defaults.",
    },
    "credentials_missing_key": {
        "what": "Credentials file {path} is missing required key(s): {keys}.",
        "next": "Add the missing keys, or delete the file to regenerate defaults.",
    },
    "readiness_timeout": {
        "what": "{description} did not become ready after {attempts} attempt(s).",
        "next": "Inspect `docker compose logs` and raise `--readiness-attempts` on slow hosts.",
    },
    "app_dir_not_empty": {
        "what": "Could not clear application directory {path}: {reason}",
        "next": "Remove it manually (files created by the container may be owned by root) and retry.",
    },
    "step_failed": {
        "what": "Step '{step}' failed: {reason}",
        "next": "Review the output above and the run report at {report}.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
