"""
Pagecache — Backend Drivers

One driver per supported store family. Client libraries are imported when a
driver is initialized, so a missing library only fails that driver.
"""

from .binary import BinaryDriver
from .local import LocalDriver, LocalStore
from .text import TextDriver

__all__ = [
    "BinaryDriver",
    "LocalDriver",
    "LocalStore",
    "TextDriver",
]
