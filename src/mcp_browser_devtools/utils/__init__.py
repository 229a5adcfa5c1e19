"""Async helpers shared by the context and the tool handlers."""

from .handles import HandleScope
from .timeouts import with_timeout
from .wait_for import WaitForHelper

__all__ = [
    "HandleScope",
    "with_timeout",
    "WaitForHelper",
]
