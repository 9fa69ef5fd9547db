"""Diagnostic-stability detection.

Public Interface:
    - StabilityDetector: Debounce/timeout state machine for analysis completion
    - StabilityState: Per-cycle bookkeeping
    - DiagnosticEventHub: Subscribable diagnostic-change event source
    - DiagnosticChangeEvent: Event payload
    - Subscription: Exactly-once cancellable listener handle
"""

from .detector import DEFAULT_FALLBACK_DELAY
from .detector import DEFAULT_MAX_WAIT
from .detector import DEFAULT_STABILITY_WINDOW
from .detector import DEFAULT_WATCHED_EXTENSIONS
from .detector import StabilityDetector
from .detector import StabilityState
from .events import DiagnosticChangeEvent
from .events import DiagnosticEventHub
from .events import DiagnosticEventSource
from .events import DiagnosticListener
from .events import Subscription

__all__ = [
    "DEFAULT_FALLBACK_DELAY",
    "DEFAULT_MAX_WAIT",
    "DEFAULT_STABILITY_WINDOW",
    "DEFAULT_WATCHED_EXTENSIONS",
    "DiagnosticChangeEvent",
    "DiagnosticEventHub",
    "DiagnosticEventSource",
    "DiagnosticListener",
    "StabilityDetector",
    "StabilityState",
    "Subscription",
]
