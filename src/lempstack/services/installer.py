"""Laravel scaffolding and settings configuration inside the PHP container."""

import os
import posixpath
import time
from typing import Callable, Dict, List

from lempstack.constants import (
    CONTAINER_APP_ROOT,
    DB_CONTAINER,
    DB_PORT,
    SERVICE_PHP,
    WRITABLE_DIRS,
    WRITABLE_MODE,
)
from lempstack.models import Credentials, ProjectLayout, ReadinessPolicy
from lempstack.services.readiness import wait_until
from lempstack.services.settings import EnvSettings


class InstallerService:
    """Scaffolds the application with Composer and wires it to the database."""

    SETTINGS_FILE = posixpath.join(CONTAINER_APP_ROOT, ".env")
    SETTINGS_EXAMPLE = posixpath.join(CONTAINER_APP_ROOT, ".env.example")
    ARTISAN = posixpath.join(CONTAINER_APP_ROOT, "artisan")

    def __init__(self, logger, console, docker_runtime, filesystem_service, layout: ProjectLayout, sleep=time.sleep):
        self.logger = logger
        self.console = console
        self.docker_runtime = docker_runtime
        self.filesystem_service = filesystem_service
        self.layout = layout
        self.sleep = sleep

    def _php(self, compose_cmd: List[str], *args: str) -> List[str]:
        return self.docker_runtime.exec_in(compose_cmd, SERVICE_PHP, *args)

    @staticmethod
    def database_settings(credentials: Credentials) -> Dict[str, str]:
        return {
            "DB_CONNECTION": "mysql",
            "DB_HOST": DB_CONTAINER,
            "DB_PORT": str(DB_PORT),
            "DB_DATABASE": credentials.database,
            "DB_USERNAME": credentials.username,
            "DB_PASSWORD": credentials.password,
        }

    def clear_application_dir(self):
        self.logger.info("Clearing application directory %s", self.layout.app_dir)
        self.filesystem_service.clear_dir(self.layout.app_dir)

    def create_project(self, compose_cmd: List[str], run_cmd: Callable):
        self.console.print("[blue]Installing Laravel...[/blue]")
        run_cmd(
            self._php(
                compose_cmd,
                "composer",
                "create-project",
                "laravel/laravel",
                CONTAINER_APP_ROOT,
                "--prefer-dist",
            )
        )

    def wait_for_scaffold(self, policy: ReadinessPolicy):
        expected = [
            os.path.join(self.layout.app_dir, ".env.example"),
            os.path.join(self.layout.app_dir, "artisan"),
        ]
        wait_until(
            lambda: self.filesystem_service.paths_exist(expected),
            "Laravel scaffold",
            policy,
            self.logger,
            sleep=self.sleep,
        )

    def generate_app_key(self, compose_cmd: List[str], run_cmd: Callable):
        run_cmd(self._php(compose_cmd, "cp", self.SETTINGS_EXAMPLE, self.SETTINGS_FILE))
        run_cmd(self._php(compose_cmd, "php", self.ARTISAN, "key:generate"))

    def configure_settings(self, compose_cmd: List[str], credentials: Credentials, run_cmd: Callable) -> Dict[str, str]:
        result = run_cmd(self._php(compose_cmd, "cat", self.SETTINGS_FILE), capture_output=True)
        settings = EnvSettings.parse(result.stdout or "")

        outcomes: Dict[str, str] = {}
        for key, value in self.database_settings(credentials).items():
            outcome = settings.set(key, value)
            outcomes[key] = outcome
            if outcome == "appended":
                self.logger.warning("%s was not present in %s; appended it.", key, self.SETTINGS_FILE)
            else:
                self.logger.debug("%s %s in %s", key, outcome, self.SETTINGS_FILE)

        run_cmd(
            self._php(compose_cmd, "sh", "-c", f"cat > {self.SETTINGS_FILE}"),
            input=settings.serialize(),
        )
        return outcomes

    def prepare_writable_dirs(self, compose_cmd: List[str], run_cmd: Callable):
        paths = [posixpath.join(CONTAINER_APP_ROOT, relative) for relative in WRITABLE_DIRS]
        run_cmd(self._php(compose_cmd, "mkdir", "-p", *paths))
        run_cmd(self._php(compose_cmd, "chmod", "-R", WRITABLE_MODE, *paths))

    def install(
        self,
        compose_cmd: List[str],
        credentials: Credentials,
        run_cmd: Callable,
        policy: ReadinessPolicy,
    ):
        self.clear_application_dir()
        self.create_project(compose_cmd, run_cmd)
        self.wait_for_scaffold(policy)
        self.generate_app_key(compose_cmd, run_cmd)
        self.configure_settings(compose_cmd, credentials, run_cmd)
        self.prepare_writable_dirs(compose_cmd, run_cmd)
        self.console.print("[green]Laravel installed and configured.[/green]")
