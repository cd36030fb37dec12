import logging
import os
import subprocess
import uuid
from typing import Any, Dict, List, Optional

import requests
from rich.console import Console

from .constants import DEFAULT_PROJECT_DIR, PROJECT_SUBDIRS
from .errors import BootstrapError, ReadinessTimeoutError
from .errors_catalog import actionable_error
from .models import Credentials, ProjectLayout, ReadinessPolicy, StatusReport
from .services.command_runner import CommandRunner
from .services.credentials import CredentialsService
from .services.docker_runtime import DockerRuntimeService
from .services.filesystem import FileSystemService
from .services.installer import InstallerService
from .services.run_report import RunReportService
from .services.status import StatusService
from .services.templates import TemplateEmitter

console = Console()
logger = logging.getLogger("lempstack")


class LempBootstrapper:
    """Provisions the nginx/PHP-FPM/MariaDB stack and scaffolds a Laravel app."""

    def __init__(
        self,
        project_dir: str = DEFAULT_PROJECT_DIR,
        keep_volumes: bool = False,
        readiness_attempts: int = 10,
        readiness_initial_delay: float = 1.0,
        readiness_max_delay: float = 15.0,
        command_timeout: Optional[float] = None,
        log_tail: int = 50,
        skip_status: bool = False,
        report_file: Optional[str] = None,
    ):
        if readiness_attempts < 1:
            raise BootstrapError("readiness_attempts must be at least 1.")
        if log_tail < 0:
            raise BootstrapError("log_tail must not be negative.")

        self.keep_volumes = keep_volumes
        self.log_tail = log_tail
        self.skip_status = skip_status
        self.readiness_policy = ReadinessPolicy(
            max_attempts=readiness_attempts,
            initial_delay=readiness_initial_delay,
            max_delay=readiness_max_delay,
        )

        self.layout = ProjectLayout(root=os.path.abspath(project_dir))
        self.report_file = report_file or self.layout.report_file
        self.run_id = uuid.uuid4().hex[:10]
        self.credentials: Optional[Credentials] = None
        self.status_report: Optional[StatusReport] = None
        self.current_step_name: Optional[str] = None

        self.run_report_service = RunReportService(report_file=self.report_file, logger=logger)
        self.filesystem_service = FileSystemService(logger=logger, console=console)
        self.credentials_service = CredentialsService(logger=logger, console=console)
        self.template_emitter = TemplateEmitter(layout=self.layout, logger=logger)
        self.command_runner = CommandRunner(logger=logger, default_timeout=command_timeout)
        self.docker_runtime_service = DockerRuntimeService(
            logger=logger,
            console=console,
            compose_file=self.layout.compose_file,
            subprocess_module=subprocess,
        )
        self.installer_service = InstallerService(
            logger=logger,
            console=console,
            docker_runtime=self.docker_runtime_service,
            filesystem_service=self.filesystem_service,
            layout=self.layout,
        )
        self.status_service = StatusService(
            logger=logger,
            console=console,
            docker_runtime=self.docker_runtime_service,
            requests_module=requests,
        )

        self.compose_cmd = self._get_docker_compose_cmd()

    def _build_metadata(self) -> Dict[str, Any]:
        return {
            "project_dir": self.layout.root,
            "keep_volumes": self.keep_volumes,
            "compose_cmd": " ".join(self.compose_cmd),
            "readiness_attempts": self.readiness_policy.max_attempts,
        }

    def _run_step(self, name: str, callback, *args, **kwargs):
        self.run_report_service.step_started(name)
        self.current_step_name = name

        try:
            result = callback(*args, **kwargs)
        except Exception as exc:
            self.run_report_service.step_finished(name, "failed", error=str(exc))
            raise

        self.run_report_service.step_finished(name, "success")
        self.current_step_name = None
        return result

    def _run_cmd(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        input: Optional[str] = None,
    ) -> subprocess.CompletedProcess:
        return self.command_runner.run(cmd, check=check, capture_output=capture_output, input=input)

    def _get_docker_compose_cmd(self) -> List[str]:
        return self.docker_runtime_service.get_docker_compose_cmd()

    def _require_credentials(self) -> Credentials:
        if self.credentials is None:
            raise BootstrapError("Credentials have not been loaded yet.")
        return self.credentials

    def prepare_project_dir(self):
        logger.info("Preparing project directory %s", self.layout.root)
        try:
            self.filesystem_service.ensure_dirs(self.layout.root, PROJECT_SUBDIRS)
        except OSError as exc:
            raise BootstrapError(f"Could not create project directory '{self.layout.root}': {exc}") from exc

    def load_credentials(self) -> Credentials:
        self.credentials_service.ensure(self.layout.credentials_file)
        self.credentials = self.credentials_service.load(self.layout.credentials_file)
        return self.credentials

    def emit_templates(self):
        self.template_emitter.emit_all(self._require_credentials())

    def validate_docker_environment(self):
        self.docker_runtime_service.validate_environment(self.compose_cmd, self._run_cmd)

    def teardown_environment(self):
        self.docker_runtime_service.teardown(
            self.compose_cmd,
            self._run_cmd,
            remove_volumes=not self.keep_volumes,
        )

    def start_containers(self):
        self.docker_runtime_service.start(self.compose_cmd, self._run_cmd)

    def wait_for_services(self):
        self.docker_runtime_service.wait_for_db(
            self.compose_cmd,
            self._run_cmd,
            self.readiness_policy,
        )
        self.docker_runtime_service.wait_for_runtime(
            self.compose_cmd,
            self._run_cmd,
            self.readiness_policy,
        )

    def install_application(self):
        self.installer_service.install(
            self.compose_cmd,
            self._require_credentials(),
            self._run_cmd,
            self.readiness_policy,
        )

    def customize_welcome_page(self):
        console.print("[blue]Customizing welcome page...[/blue]")
        self.template_emitter.emit_welcome_page()

    def report_status(self) -> StatusReport:
        status = self.status_service.report(self.compose_cmd, self._run_cmd, log_tail=self.log_tail)
        self.status_service.probe_http(status)
        self.status_report = status
        return status

    def _record_artifacts(self):
        self.run_report_service.add_artifact("credentials_file", self.layout.credentials_file)
        self.run_report_service.add_artifact("compose_file", self.layout.compose_file)
        self.run_report_service.add_artifact("dockerfile", self.layout.dockerfile)
        self.run_report_service.add_artifact("nginx_conf", self.layout.nginx_conf)
        self.run_report_service.add_artifact("welcome_template", self.layout.welcome_template)

    def _step_failure_message(self, exc: Exception) -> str:
        step = self.current_step_name or "run"
        reason = str(exc)
        # Keep the more specific suggestion carried by the underlying error.
        if "Suggested action:" in reason:
            return f"Step '{step}' failed: {reason}"
        return actionable_error("step_failed", step=step, reason=reason, report=self.report_file)

    def run(self) -> int:
        report_status = "failed"
        report_error: Optional[str] = None

        try:
            console.print("[bold]Setting up LEMP stack with Laravel...[/bold]")
            logger.info("Starting lempstack run %s", self.run_id)

            self.run_report_service.start_run(run_id=self.run_id, metadata=self._build_metadata())
            self._run_step("prepare_project_dir", self.prepare_project_dir)
            self._run_step("load_credentials", self.load_credentials)
            self._run_step("emit_templates", self.emit_templates)
            self._run_step("validate_docker_environment", self.validate_docker_environment)
            self._run_step("teardown_environment", self.teardown_environment)
            self._run_step("start_containers", self.start_containers)
            self._run_step("wait_for_services", self.wait_for_services)
            self._run_step("install_application", self.install_application)
            self._run_step("customize_welcome_page", self.customize_welcome_page)
            self._record_artifacts()

            if self.skip_status:
                logger.info("Skipping status report.")
            else:
                self._run_step("report_status", self.report_status)

            console.print("\n[bold green]LEMP stack with Laravel setup complete![/bold green]")
            report_status = "success"
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            if self.current_step_name:
                self.run_report_service.step_finished(self.current_step_name, "aborted")
            report_status = "aborted"
            report_error = "Operation cancelled by user."
            return 1
        except ReadinessTimeoutError as exc:
            report_error = self._step_failure_message(exc)
            console.print(f"[bold red]Readiness timeout:[/bold red] {report_error}")
            logger.error(report_error)
            return 1
        except BootstrapError as exc:
            report_error = self._step_failure_message(exc)
            console.print(f"[bold red]Error:[/bold red] {report_error}")
            logger.error(report_error)
            return 1
        except Exception as exc:
            report_error = self._step_failure_message(exc)
            console.print(f"[bold red]Unexpected error:[/bold red] {report_error}")
            logger.exception("Unexpected error")
            return 1
        finally:
            self.run_report_service.finalize(report_status, error=report_error)
