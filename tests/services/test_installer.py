import subprocess

import pytest

from lempstack.errors import ReadinessTimeoutError
from lempstack.models import Credentials, ProjectLayout, ReadinessPolicy
from lempstack.services.docker_runtime import DockerRuntimeService
from lempstack.services.filesystem import FileSystemService
from lempstack.services.installer import InstallerService
from lempstack.services.settings import EnvSettings

SCAFFOLD_ENV = """APP_NAME=Laravel
APP_KEY=base64:generated=
DB_CONNECTION=sqlite
# DB_HOST=127.0.0.1
# DB_PORT=3306
# DB_DATABASE=laravel
# DB_USERNAME=root
# DB_PASSWORD=
"""


class DummyLogger:
    def __init__(self):
        self.warnings = []

    def info(self, *_args, **_kwargs):
        return None

    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, message, *args, **_kwargs):
        self.warnings.append(message % args)


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


class FakeContainer:
    """Simulates the PHP container: create-project populates the bind mount."""

    def __init__(self, app_dir, env_text=SCAFFOLD_ENV):
        self.app_dir = app_dir
        self.env_text = env_text
        self.calls = []
        self.written_settings = None

    def __call__(self, cmd, check=True, capture_output=False, input=None):
        self.calls.append(cmd)
        if "create-project" in cmd:
            (self.app_dir / ".env.example").write_text(self.env_text, encoding="utf-8")
            (self.app_dir / "artisan").write_text("#!/usr/bin/env php\n", encoding="utf-8")
        if cmd[-2:] == ["cat", "/var/www/html/.env"]:
            return subprocess.CompletedProcess(cmd, 0, stdout=self.env_text, stderr="")
        if input is not None:
            self.written_settings = input
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


def _installer(tmp_path, logger=None):
    logger = logger or DummyLogger()
    layout = ProjectLayout(root=str(tmp_path))
    (tmp_path / "laravel").mkdir(exist_ok=True)
    runtime = DockerRuntimeService(
        logger=logger,
        console=DummyConsole(),
        compose_file=layout.compose_file,
        sleep=lambda _s: None,
    )
    return InstallerService(
        logger=logger,
        console=DummyConsole(),
        docker_runtime=runtime,
        filesystem_service=FileSystemService(logger=logger, console=DummyConsole()),
        layout=layout,
        sleep=lambda _s: None,
    )


def _credentials():
    return Credentials(root_password="admin", database="laravel_db", username="popo", password="baba4678")


def _tail(call):
    return call[7:]


def test_install_runs_steps_in_order(tmp_path):
    app_dir = tmp_path / "laravel"
    app_dir.mkdir()
    (app_dir / "stale.php").write_text("old", encoding="utf-8")
    (app_dir / ".git").mkdir()
    (app_dir / ".git" / "HEAD").write_text("ref", encoding="utf-8")
    container = FakeContainer(app_dir)

    _installer(tmp_path).install(["docker", "compose"], _credentials(), container, ReadinessPolicy(max_attempts=2))

    assert not (app_dir / "stale.php").exists()
    assert not (app_dir / ".git").exists()
    assert [_tail(call) for call in container.calls] == [
        ["composer", "create-project", "laravel/laravel", "/var/www/html", "--prefer-dist"],
        ["cp", "/var/www/html/.env.example", "/var/www/html/.env"],
        ["php", "/var/www/html/artisan", "key:generate"],
        ["cat", "/var/www/html/.env"],
        ["sh", "-c", "cat > /var/www/html/.env"],
        ["mkdir", "-p", "/var/www/html/storage", "/var/www/html/bootstrap/cache"],
        ["chmod", "-R", "777", "/var/www/html/storage", "/var/www/html/bootstrap/cache"],
    ]
    for call in container.calls:
        assert call[4:7] == ["exec", "-T", "php"]


def test_configure_settings_writes_credentials(tmp_path):
    container = FakeContainer(tmp_path / "laravel")

    outcomes = _installer(tmp_path).configure_settings(["docker", "compose"], _credentials(), container)

    settings = EnvSettings.parse(container.written_settings)
    assert settings.get("DB_DATABASE") == "laravel_db"
    assert settings.get("DB_USERNAME") == "popo"
    assert settings.get("DB_PASSWORD") == "baba4678"
    assert settings.get("DB_CONNECTION") == "mysql"
    assert settings.get("DB_HOST") == "lemp-mariadb"
    assert settings.get("APP_KEY") == "base64:generated="
    assert outcomes["DB_DATABASE"] == "uncommented"
    assert outcomes["DB_CONNECTION"] == "updated"


def test_configure_settings_appends_missing_keys_with_warning(tmp_path):
    logger = DummyLogger()
    container = FakeContainer(tmp_path / "laravel", env_text="APP_NAME=Laravel\n")

    outcomes = _installer(tmp_path, logger=logger).configure_settings(
        ["docker", "compose"], _credentials(), container
    )

    assert outcomes["DB_PASSWORD"] == "appended"
    assert "DB_PASSWORD=baba4678" in container.written_settings
    assert any("DB_DATABASE was not present" in message for message in logger.warnings)


def test_wait_for_scaffold_times_out_when_files_never_appear(tmp_path):
    with pytest.raises(ReadinessTimeoutError, match="Laravel scaffold"):
        _installer(tmp_path).wait_for_scaffold(ReadinessPolicy(max_attempts=2))
