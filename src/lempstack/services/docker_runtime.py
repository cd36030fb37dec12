"""Docker runtime services for lempstack."""

import re
import subprocess
import time
from typing import Callable, List, Optional

from packaging import version

from lempstack.constants import MIN_COMPOSE_VERSION, SERVICE_DB, SERVICE_PHP
from lempstack.errors import BootstrapError
from lempstack.errors_catalog import actionable_error
from lempstack.models import ReadinessPolicy
from lempstack.services.readiness import wait_until

_VERSION_PATTERN = re.compile(r"v?(\d+\.\d+(?:\.\d+)?)")


class DockerRuntimeService:
    """Manages docker-compose detection and the stack lifecycle."""

    def __init__(self, logger, console, compose_file: str, subprocess_module=subprocess, sleep=time.sleep):
        self.logger = logger
        self.console = console
        self.compose_file = compose_file
        self.subprocess = subprocess_module
        self.sleep = sleep

    def get_docker_compose_cmd(self) -> List[str]:
        try:
            self.subprocess.run(["docker", "compose", "version"], check=True, capture_output=True)
            return ["docker", "compose"]
        except (self.subprocess.CalledProcessError, FileNotFoundError):
            try:
                self.subprocess.run(["docker-compose", "--version"], check=True, capture_output=True)
                return ["docker-compose"]
            except (self.subprocess.CalledProcessError, FileNotFoundError):
                raise BootstrapError(actionable_error("compose_not_found"))

    @staticmethod
    def parse_compose_version(output: str) -> Optional[version.Version]:
        match = _VERSION_PATTERN.search(output or "")
        if not match:
            return None
        try:
            return version.parse(match.group(1))
        except version.InvalidVersion:
            return None

    def validate_environment(self, compose_cmd: List[str], run_cmd: Callable):
        self.console.print("[blue]Validating Docker environment...[/blue]")
        run_cmd(["docker", "--version"], capture_output=True)
        result = run_cmd(compose_cmd + ["version"], capture_output=True)

        compose_version = self.parse_compose_version(result.stdout)
        if compose_version is None:
            self.logger.warning("Could not determine Docker Compose version.")
        elif compose_version < version.parse(MIN_COMPOSE_VERSION):
            self.logger.warning(
                "Docker Compose %s is older than %s; some commands may behave differently.",
                compose_version,
                MIN_COMPOSE_VERSION,
            )
        self.console.print("[green]Docker is available.[/green]")

    def compose(self, compose_cmd: List[str], *args: str) -> List[str]:
        return compose_cmd + ["-f", self.compose_file] + list(args)

    def exec_in(self, compose_cmd: List[str], service: str, *args: str) -> List[str]:
        return self.compose(compose_cmd, "exec", "-T", service, *args)

    def teardown(self, compose_cmd: List[str], run_cmd: Callable, remove_volumes: bool = True):
        self.console.print("[dim]Tearing down previous environment...[/dim]")
        args = ["down", "-v"] if remove_volumes else ["down"]
        if not remove_volumes:
            self.logger.info("Keeping named volumes from the previous run.")
        run_cmd(self.compose(compose_cmd, *args))

    def start(self, compose_cmd: List[str], run_cmd: Callable):
        self.console.print("[blue]Starting LEMP stack containers...[/blue]")
        self.logger.info("Building images and starting services...")
        run_cmd(self.compose(compose_cmd, "up", "-d", "--build"))

    def _succeeds(self, cmd: List[str], run_cmd: Callable) -> bool:
        result = run_cmd(cmd, check=False, capture_output=True)
        return result.returncode == 0

    def wait_for_db(
        self,
        compose_cmd: List[str],
        run_cmd: Callable,
        policy: ReadinessPolicy,
    ):
        self.console.print("[yellow]Waiting for database to be ready...[/yellow]")
        cmd = self.exec_in(
            compose_cmd,
            SERVICE_DB,
            "mysqladmin",
            "ping",
            "-h",
            "localhost",
            "--silent",
        )
        wait_until(
            lambda: self._succeeds(cmd, run_cmd),
            "Database service",
            policy,
            self.logger,
            sleep=self.sleep,
        )
        self.console.print("[green]Database is ready.[/green]")

    def wait_for_runtime(self, compose_cmd: List[str], run_cmd: Callable, policy: ReadinessPolicy):
        self.console.print("[yellow]Waiting for PHP runtime to be ready...[/yellow]")
        cmd = self.exec_in(compose_cmd, SERVICE_PHP, "php", "-v")
        wait_until(
            lambda: self._succeeds(cmd, run_cmd),
            "PHP runtime service",
            policy,
            self.logger,
            sleep=self.sleep,
        )
        self.console.print("[green]PHP runtime is ready.[/green]")
