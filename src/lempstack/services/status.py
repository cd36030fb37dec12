"""Final status report: container list, recent logs and an HTTP probe."""

from typing import Callable, List

import requests

from lempstack.constants import HTTP_PORT, SERVICES
from lempstack.models import StatusReport


class StatusService:
    """Prints raw orchestrator output for operator visibility."""

    def __init__(self, logger, console, docker_runtime, requests_module=requests):
        self.logger = logger
        self.console = console
        self.docker_runtime = docker_runtime
        self.requests = requests_module

    def report(self, compose_cmd: List[str], run_cmd: Callable, log_tail: int = 50) -> StatusReport:
        self.console.print("[blue]Checking container status...[/blue]")
        status = StatusReport()

        result = run_cmd(self.docker_runtime.compose(compose_cmd, "ps"), check=False)
        status.return_codes["ps"] = result.returncode

        for service in SERVICES:
            self.console.rule(f"[bold]{service} logs")
            result = run_cmd(
                self.docker_runtime.compose(compose_cmd, "logs", "--tail", str(log_tail), service),
                check=False,
            )
            status.return_codes[f"logs {service}"] = result.returncode

        return status

    def probe_http(self, status: StatusReport, url: str = f"http://localhost:{HTTP_PORT}/", timeout: float = 10.0):
        try:
            response = self.requests.get(url, timeout=timeout)
        except requests.RequestException as exc:
            status.http_error = str(exc)
            self.logger.warning("HTTP probe of %s failed: %s", url, exc)
            return status

        status.http_status = response.status_code
        if response.status_code >= 500:
            self.logger.warning("HTTP probe of %s returned %s", url, response.status_code)
        else:
            self.console.print(f"[green]{url} answered with HTTP {response.status_code}.[/green]")
        return status
