"""
shortener package initializer.
"""

from . import api
from . import manager
from . import storage

__all__ = ["api", "manager", "storage"]
