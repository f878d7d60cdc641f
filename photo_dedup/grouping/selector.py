#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Best-photo selection for duplicate groups.
"""

from typing import Callable, Dict, Sequence, Tuple

from ..errors import ConfigurationError
from ..models.fingerprint_record import FingerprintRecord
from ..models.preferences import KeepPreference

Score = Callable[[FingerprintRecord], float]

# Higher score wins for every preference
_SCORES: Dict[KeepPreference, Score] = {
    KeepPreference.NEWEST: lambda r: r.last_write_time.timestamp(),
    KeepPreference.OLDEST: lambda r: -r.last_write_time.timestamp(),
    KeepPreference.LARGEST: lambda r: r.size_bytes,
    KeepPreference.SMALLEST: lambda r: -r.size_bytes,
    KeepPreference.HIGHEST_RESOLUTION: lambda r: r.resolution_px,
    KeepPreference.LOWEST_RESOLUTION: lambda r: -r.resolution_px,
    KeepPreference.GRAYSCALE: lambda r: 1 if r.is_grayscale else 0,
    KeepPreference.COLORFUL: lambda r: 0 if r.is_grayscale else 1,
}


def score_for(preference: KeepPreference) -> Score:
    try:
        return _SCORES[preference]
    except KeyError:
        raise ValueError(f"Unsupported keep preference: {preference!r}") from None


class BestPhotoSelector:
    """Picks the image to keep by ranking a group lexicographically over a preference chain."""

    def find_best_photo(self, group: Sequence[FingerprintRecord],
                        keep_preferences: Sequence[KeepPreference]) -> FingerprintRecord:
        if not group:
            raise ValueError("Cannot pick the best photo of an empty group.")
        if not keep_preferences:
            raise ConfigurationError("At least one preference should be provided for --keep.")

        scores = [score_for(preference) for preference in keep_preferences]

        def rank(record: FingerprintRecord) -> Tuple[float, ...]:
            return tuple(score(record) for score in scores)

        # max() keeps the first of equally ranked records
        return max(group, key=rank)
