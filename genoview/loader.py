"""
Region loader

Fetches track payloads for the current region and guards against stale
results: every fetch is tagged with the viewport generation at issue time and
its payload is only adopted if no region change happened in between.

Failures keep the last good data on screen unless the caller asks to clear.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional
import logging

from .composer import TrackComposer
from .errors import DataFetchFailure, TrackNotFound
from .types import Payload
from .viewport import GenomicRegion, ViewportController

logger = logging.getLogger(__name__)

DataSource = Callable[[GenomicRegion], Payload]


@dataclass(frozen=True)
class FetchTicket:
    """
    Handle for one in-flight fetch

    Attributes:
        track_id: Track the payload is for
        generation: Viewport generation when the fetch was issued
        region: Region requested from the data source
    """
    track_id: str
    generation: int
    region: GenomicRegion


class RegionLoader:
    """
    Stale-result guard between data sources and tracks

    Args:
        composer: Composer owning the tracks
        viewport: Viewport whose generation counter tags fetches
    """

    def __init__(self, composer: TrackComposer, viewport: ViewportController) -> None:
        self.composer = composer
        self.viewport = viewport
        self.failures: Dict[str, DataFetchFailure] = {}

    def begin(self, track_id: str) -> FetchTicket:
        """
        Issue a ticket for the current region

        Raises:
            TrackNotFound: If the track is not registered with the composer
        """
        if track_id not in self.composer:
            raise TrackNotFound(track_id)
        return FetchTicket(track_id, self.viewport.generation, self.viewport.region)

    def is_current(self, ticket: FetchTicket) -> bool:
        return ticket.generation == self.viewport.generation

    def apply(self, ticket: FetchTicket, payload: Payload) -> bool:
        """
        Hand a payload to its track unless the ticket is stale

        Returns:
            True if the track adopted the payload
        """
        if not self.is_current(ticket):
            logger.debug(f"Discarding stale payload for '{ticket.track_id}' "
                         f"(generation {ticket.generation} != {self.viewport.generation})")
            return False

        track = self.composer.get_track(ticket.track_id)
        if track is None:
            return False

        track.set_data(payload)
        self.failures.pop(ticket.track_id, None)
        logger.debug(f"Track '{ticket.track_id}' loaded for {ticket.region}")
        return True

    def fail(self, ticket: FetchTicket, error: BaseException, clear: bool = False) -> DataFetchFailure:
        """
        Record a failed fetch

        The track keeps its last data unless clear is set. Stale failures are
        reported but never clear anything.
        """
        failure = error if isinstance(error, DataFetchFailure) else DataFetchFailure(ticket.track_id, error)
        logger.warning(str(failure))
        self.failures[ticket.track_id] = failure

        if clear and self.is_current(ticket):
            track = self.composer.get_track(ticket.track_id)
            if track is not None:
                track.clear()

        if self.composer.on_warning is not None:
            self.composer.on_warning(failure)
        return failure

    def load(self, sources: Mapping[str, DataSource], clear_on_error: bool = False) -> Dict[str, bool]:
        """
        Fetch synchronously from each source and apply the results

        Args:
            sources: Track id -> data source callable
            clear_on_error: Clear tracks whose source raised

        Returns:
            Track id -> whether new data was adopted
        """
        results: Dict[str, bool] = {}
        for track_id, source in sources.items():
            ticket = self.begin(track_id)
            try:
                payload = source(ticket.region)
            except Exception as exc:
                self.fail(ticket, exc, clear=clear_on_error)
                results[track_id] = False
                continue
            results[track_id] = self.apply(ticket, payload)

        loaded = sum(results.values())
        logger.info(f"Loaded {loaded}/{len(results)} tracks for {self.viewport.region}")
        return results

    def last_failure(self, track_id: str) -> Optional[DataFetchFailure]:
        return self.failures.get(track_id)
