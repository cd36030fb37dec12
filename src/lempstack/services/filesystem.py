"""Filesystem helpers for lempstack."""

import logging
import os
import shutil
from typing import Iterable

from rich.console import Console

from lempstack.errors import BootstrapError
from lempstack.errors_catalog import actionable_error


class FileSystemService:
    """Encapsulates file and directory side effects."""

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def ensure_dirs(self, root: str, subdirs: Iterable[str]):
        for subdir in subdirs:
            os.makedirs(os.path.join(root, subdir), exist_ok=True)

    def clear_dir(self, path: str):
        """Remove every entry inside ``path``, hidden ones included, keeping the directory."""
        if not os.path.exists(path):
            os.makedirs(path, exist_ok=True)
            return

        for entry in os.listdir(path):
            entry_path = os.path.join(path, entry)
            try:
                if os.path.isdir(entry_path) and not os.path.islink(entry_path):
                    shutil.rmtree(entry_path)
                else:
                    os.remove(entry_path)
            except OSError as exc:
                raise BootstrapError(
                    actionable_error("app_dir_not_empty", path=path, reason=str(exc))
                ) from exc
            self.logger.debug("Removed: %s", entry_path)

    def paths_exist(self, paths: Iterable[str]) -> bool:
        return all(os.path.exists(path) for path in paths)
