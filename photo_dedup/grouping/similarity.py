#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Similarity thresholds and threshold-based duplicate grouping.
"""

import logging
from typing import List, Sequence

from ..config import HASH_BITS
from ..errors import ConfigurationError
from ..models.fingerprint_record import FingerprintRecord
from .dsu import DisjointSetUnion
from .vptree import VPTree

logger = logging.getLogger(__name__)


def hamming_distance(a: int, b: int) -> int:
    return (a ^ b).bit_count()


def validate_similarity_bar(similarity_bar: float) -> float:
    if not 0 <= similarity_bar <= 100:
        raise ConfigurationError(f"Similarity bar must be within [0, 100], got {similarity_bar}.")
    return similarity_bar


def max_distance_for(similarity_bar: float) -> int:
    """
    Exclusive Hamming bound for "at least similarity_bar percent similar".

    round() is half-to-even. The +1 turns the exclusive radius search into an
    inclusive similarity check: 100 -> 1 (identical only), 0 -> 65 (everything).
    """
    validate_similarity_bar(similarity_bar)
    return HASH_BITS - int(round(HASH_BITS * similarity_bar / 100.0)) + 1


def build_image_tree(records: Sequence[FingerprintRecord], seed=None) -> VPTree:
    return VPTree(records, lambda x, y: x.distance(y), seed=seed)


def build_image_groups(records: Sequence[FingerprintRecord], similarity_bar: float,
                       ignore_singletons: bool = True, seed=None) -> List[List[FingerprintRecord]]:
    """Group records whose fingerprints are transitively within the similarity bar."""
    for position, record in enumerate(records):
        if record.id != position:
            raise ValueError(f"Record {record.physical_path} has id {record.id}, expected {position}.")

    logger.info("Calculating duplicates for %d images with similarity bar %s.",
                len(records), similarity_bar)
    logger.debug("Ignore singletons means if a group has only one image, it will be ignored: %s.",
                 ignore_singletons)

    max_distance = max_distance_for(similarity_bar)
    tree = build_image_tree(records, seed=seed)
    dsu = DisjointSetUnion(len(records))
    for record in records:
        for match, _ in tree.search_within(record, max_distance):
            dsu.union(record.id, match.id)

    groups = [[records[i] for i in ids] for ids in dsu.as_groups(ignore_singletons)]
    logger.info("Found %d duplicate groups and totally %d duplicate pictures.",
                len(groups), sum(len(g) for g in groups))
    return groups
