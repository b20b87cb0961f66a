"""
shortlink package initializer.
"""

from . import errors
from . import manager
from . import storage

__version__ = "0.1.0"

__all__ = ["errors", "manager", "storage"]
