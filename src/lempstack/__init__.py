"""
lempstack - Local LEMP + Laravel development environment bootstrapper
"""

__version__ = "0.1.0"

from .core import LempBootstrapper
from .errors import BootstrapError

__all__ = ["LempBootstrapper", "BootstrapError"]
