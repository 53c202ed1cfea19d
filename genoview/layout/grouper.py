"""
Feature grouper

Merges features that sit too close together in pixel space into aggregate
glyphs. Membership depends only on adjacency in sorted order: a feature joins
the current group when it lies less than min_gap pixels from the group's
last member, otherwise it starts a new group.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional
import logging

from .types import FeatureGroup

logger = logging.getLogger(__name__)


class FeatureGrouper:
    """
    Adjacency-based grouping of point-like features

    Args:
        min_gap: Pixel distance below which neighbours merge
        position_of: Genomic sort key of a feature
        category_of: Category used for the group breakdown
        weight_of: Weight summed per group (defaults to 1 per feature)
    """

    def __init__(
        self,
        min_gap: float,
        position_of: Callable[[Any], float],
        category_of: Optional[Callable[[Any], str]] = None,
        weight_of: Optional[Callable[[Any], float]] = None
    ) -> None:
        if min_gap < 0:
            raise ValueError(f"min_gap must be >= 0, got {min_gap}")
        self.min_gap = min_gap
        self.position_of = position_of
        self.category_of = category_of or (lambda feature: 'feature')
        self.weight_of = weight_of or (lambda feature: 1.0)

    def group(self, features: Iterable[Any], to_pixel: Callable[[float], float]) -> List[FeatureGroup]:
        """
        Group features in genomic order

        Args:
            features: Features to group
            to_pixel: Genomic position -> pixel mapping

        Returns:
            Groups in left-to-right order; every feature belongs to exactly one
        """
        ordered = sorted(features, key=self.position_of)

        runs: List[List[Any]] = []
        run_pixels: List[List[float]] = []

        for feature in ordered:
            x = to_pixel(self.position_of(feature))
            if runs and x - run_pixels[-1][-1] < self.min_gap:
                runs[-1].append(feature)
                run_pixels[-1].append(x)
            else:
                runs.append([feature])
                run_pixels.append([x])

        groups = [self._build_group(members, pixels) for members, pixels in zip(runs, run_pixels)]
        logger.debug(f"Grouped {len(ordered)} features into {len(groups)} glyphs (min_gap={self.min_gap})")
        return groups

    def _build_group(self, members: List[Any], pixels: List[float]) -> FeatureGroup:
        breakdown: Dict[str, int] = {}
        weight = 0.0
        for feature in members:
            category = self.category_of(feature)
            breakdown[category] = breakdown.get(category, 0) + 1
            weight += self.weight_of(feature)
        return FeatureGroup(
            members=tuple(members),
            pixels=tuple(pixels),
            breakdown=breakdown,
            weight=weight
        )
