import pytest

from lempstack.errors import BootstrapError
from lempstack.services.filesystem import FileSystemService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


def test_clear_dir_removes_hidden_entries_and_keeps_directory(tmp_path):
    app_dir = tmp_path / "laravel"
    (app_dir / ".git" / "objects").mkdir(parents=True)
    (app_dir / ".env").write_text("APP_KEY=x", encoding="utf-8")
    (app_dir / "vendor").mkdir()
    (app_dir / "artisan").write_text("php", encoding="utf-8")

    FileSystemService(DummyLogger(), DummyConsole()).clear_dir(str(app_dir))

    assert app_dir.is_dir()
    assert list(app_dir.iterdir()) == []


def test_clear_dir_creates_missing_directory(tmp_path):
    app_dir = tmp_path / "laravel"

    FileSystemService(DummyLogger(), DummyConsole()).clear_dir(str(app_dir))

    assert app_dir.is_dir()


def test_clear_dir_raises_actionable_error(tmp_path, monkeypatch):
    app_dir = tmp_path / "laravel"
    app_dir.mkdir()
    (app_dir / "locked.txt").write_text("x", encoding="utf-8")

    def deny(_path):
        raise PermissionError("Permission denied")

    monkeypatch.setattr("lempstack.services.filesystem.os.remove", deny)

    with pytest.raises(BootstrapError, match="Could not clear application directory"):
        FileSystemService(DummyLogger(), DummyConsole()).clear_dir(str(app_dir))


def test_ensure_dirs_creates_project_structure(tmp_path):
    FileSystemService(DummyLogger(), DummyConsole()).ensure_dirs(str(tmp_path), ("nginx", "php", "mysql", "laravel"))

    assert sorted(path.name for path in tmp_path.iterdir()) == ["laravel", "mysql", "nginx", "php"]
