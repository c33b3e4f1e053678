"""Runtime policy values for a scan session.

Defaults match the store hardware profile; each can be overridden through
``SCANGO_*`` environment variables expressed in milliseconds.
"""

import os
from dataclasses import dataclass

WEDGE_TERMINATORS = frozenset({"Enter", "\n", "\r"})


def _millis(name: str, default_ms: int) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default_ms / 1000
    value = int(raw)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value / 1000


@dataclass(frozen=True)
class ScanSettings:
    """Timing policy for debounce, feedback display and catalogue lookups (seconds)."""

    camera_cooldown: float = 0.6
    success_display: float = 1.8
    warning_display: float = 1.4
    lookup_timeout: float = 5.0
    idle_text: str = "Ready to scan"
    wedge_terminators: frozenset[str] = WEDGE_TERMINATORS

    @classmethod
    def from_env(cls) -> "ScanSettings":
        return cls(
            camera_cooldown=_millis("SCANGO_CAMERA_COOLDOWN_MS", 600),
            success_display=_millis("SCANGO_SUCCESS_DISPLAY_MS", 1800),
            warning_display=_millis("SCANGO_WARNING_DISPLAY_MS", 1400),
            lookup_timeout=_millis("SCANGO_LOOKUP_TIMEOUT_MS", 5000),
        )
