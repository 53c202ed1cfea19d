"""
Error types

All conditions are local and recoverable. InvalidRegion is raised to the
caller; TrackNotFound and OverflowFeatureCount are reported as warnings;
DataFetchFailure wraps exceptions coming from a data-source collaborator.
"""

from __future__ import annotations
from typing import Optional


class GenoviewError(Exception):
    """Base class for genoview errors"""


class InvalidRegion(GenoviewError, ValueError):
    """Region with start >= end, bounds outside the chromosome, or unknown chromosome"""

    def __init__(self, message: str, region: Optional[object] = None) -> None:
        super().__init__(message)
        self.region = region


class TrackNotFound(GenoviewError, KeyError):
    """Operation referenced an unregistered track id"""

    def __init__(self, track_id: str) -> None:
        super().__init__(track_id)
        self.track_id = track_id

    def __str__(self) -> str:
        return f"Track not found: {self.track_id}"


class OverflowFeatureCount(GenoviewError):
    """
    More features than available rows in a layout pass

    Not raised during layout. Tracks keep the last instance in
    ``last_overflow`` and draw a "+N more" indicator.
    """

    def __init__(self, track_id: str, count: int, max_rows: int) -> None:
        super().__init__(f"{track_id}: {count} features exceed {max_rows} rows")
        self.track_id = track_id
        self.count = count
        self.max_rows = max_rows


class DataFetchFailure(GenoviewError):
    """Data-source collaborator failed to deliver data for a track"""

    def __init__(self, track_id: str, cause: Optional[BaseException] = None) -> None:
        message = f"Data fetch failed for track {track_id}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.track_id = track_id
        self.cause = cause


class GestureStateError(GenoviewError, RuntimeError):
    """Gesture operation called from the wrong viewport state"""
