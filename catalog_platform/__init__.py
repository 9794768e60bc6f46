"""
catalog_platform package initializer.
"""

from . import manager
from . import models
from . import storage

__all__ = ["manager", "models", "storage"]
