"""Normalized scan events shared by both input channels."""

from dataclasses import dataclass
from enum import Enum


class ScanSource(Enum):
    WEDGE = "wedge"
    CAMERA = "camera"


@dataclass(frozen=True)
class ScanEvent:
    """One decoded barcode, tagged with the channel it came from.

    ``observed_at`` is a monotonic timestamp in seconds taken from the
    session clock.
    """

    barcode: str
    source: ScanSource
    observed_at: float

    def __post_init__(self):
        if not self.barcode:
            raise ValueError("ScanEvent requires a non-empty barcode")
