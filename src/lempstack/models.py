"""Shared domain models for lempstack."""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from .constants import (
    APP_DIR,
    COMPOSE_FILE,
    CREDENTIALS_FILE,
    DOCKERFILE,
    NGINX_CONF,
    REPORT_FILE,
    WELCOME_TEMPLATE,
)


@dataclass(frozen=True)
class Credentials:
    """Database credentials shared by the manifest and the application settings."""

    root_password: str
    database: str
    username: str
    password: str

    @classmethod
    def from_mapping(cls, values: Dict[str, str]) -> "Credentials":
        return cls(
            root_password=values["DB_ROOT_PASSWORD"],
            database=values["DB_DATABASE"],
            username=values["DB_USERNAME"],
            password=values["DB_PASSWORD"],
        )


@dataclass(frozen=True)
class ProjectLayout:
    """Absolute paths of every artifact inside one project directory."""

    root: str

    @property
    def credentials_file(self) -> str:
        return os.path.join(self.root, CREDENTIALS_FILE)

    @property
    def compose_file(self) -> str:
        return os.path.join(self.root, COMPOSE_FILE)

    @property
    def dockerfile(self) -> str:
        return os.path.join(self.root, *DOCKERFILE.split("/"))

    @property
    def nginx_conf(self) -> str:
        return os.path.join(self.root, *NGINX_CONF.split("/"))

    @property
    def app_dir(self) -> str:
        return os.path.join(self.root, APP_DIR)

    @property
    def welcome_template(self) -> str:
        return os.path.join(self.app_dir, *WELCOME_TEMPLATE.split("/"))

    @property
    def report_file(self) -> str:
        return os.path.join(self.root, REPORT_FILE)


@dataclass(frozen=True)
class ReadinessPolicy:
    """Bounded exponential backoff used while waiting for services."""

    max_attempts: int = 10
    initial_delay: float = 1.0
    max_delay: float = 15.0
    factor: float = 2.0


@dataclass
class StatusReport:
    """Outcome of the final status commands."""

    return_codes: Dict[str, int] = field(default_factory=dict)
    http_status: Optional[int] = None
    http_error: Optional[str] = None
