"""Compile-status beacon.

Public Interface:
    - CompileStatusStore: Fail-soft persistence of the compile-status record
    - CompileStatusBeacon: Compile cycle tracking and background-run toggle
    - BackgroundRunFlag: Protocol for the host's background-run setting
    - InMemoryBackgroundRunFlag: Process-local flag implementation
"""

from .beacon import CompileStatusBeacon
from .flags import BackgroundRunFlag
from .flags import InMemoryBackgroundRunFlag
from .store import CompileStatusStore

__all__ = [
    "BackgroundRunFlag",
    "CompileStatusBeacon",
    "CompileStatusStore",
    "InMemoryBackgroundRunFlag",
]
