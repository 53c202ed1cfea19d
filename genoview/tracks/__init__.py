"""
Track Module for genoview

Public API:
    - Track, TrackState, RenderContext: Shared track skeleton
    - GeneTrack, MutationTrack, SignalTrack, AnnotationTrack
    - AlignmentTrack, ContinuousSignalTrack, JunctionTrack
    - TRACK_TYPES / create_track: Registry keyed by track kind
"""

from typing import Any, Dict, Type

from .base import Track, TrackState, RenderContext
from .gene import GeneTrack
from .mutation import MutationTrack
from .signal import SignalTrack
from .annotation import AnnotationTrack
from .alignment import AlignmentTrack
from .continuous_signal import ContinuousSignalTrack
from .junction import JunctionTrack

TRACK_TYPES: Dict[str, Type[Track]] = {
    cls.kind: cls
    for cls in (GeneTrack, MutationTrack, SignalTrack, AnnotationTrack,
                AlignmentTrack, ContinuousSignalTrack, JunctionTrack)
}


def create_track(kind: str, track_id: str, **kwargs: Any) -> Track:
    """
    Instantiate a registered track kind

    Raises:
        ValueError: If kind is not registered
    """
    try:
        cls = TRACK_TYPES[kind]
    except KeyError:
        raise ValueError(f"Unknown track kind: {kind} (expected one of {sorted(TRACK_TYPES)})") from None
    return cls(track_id, **kwargs)


__all__ = [
    'Track',
    'TrackState',
    'RenderContext',
    'GeneTrack',
    'MutationTrack',
    'SignalTrack',
    'AnnotationTrack',
    'AlignmentTrack',
    'ContinuousSignalTrack',
    'JunctionTrack',
    'TRACK_TYPES',
    'create_track',
]
