#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
K-means grouping of fingerprints, for coarse "distribute into folders" runs.
Fingerprints are treated as 64-dimensional 0/1 vectors.
"""

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from ..config import HASH_BITS, KMEANS_MAX_ITERATIONS
from .similarity import validate_similarity_bar

logger = logging.getLogger(__name__)


def cluster_count(n_points: int, similarity_bar: float) -> int:
    """k = max(1, ceil(sqrt(N) * bar / 100 + 1)), never more than the number of points."""
    validate_similarity_bar(similarity_bar)
    k = max(1, math.ceil(math.sqrt(n_points) * (similarity_bar / 100.0) + 1))
    return min(k, max(n_points, 1))


def fingerprints_to_vectors(fingerprints: Sequence[int]) -> np.ndarray:
    """Bit i of each fingerprint becomes coordinate i."""
    bits = np.arange(HASH_BITS, dtype=np.uint64)
    values = np.array([int(f) for f in fingerprints], dtype=np.uint64).reshape(-1, 1)
    return ((values >> bits) & np.uint64(1)).astype(np.float64)


def _assign(points: np.ndarray, centers: np.ndarray) -> np.ndarray:
    # Squared euclidean distance to every center
    d2 = (
        (points ** 2).sum(axis=1)[:, None]
        - 2.0 * points @ centers.T
        + (centers ** 2).sum(axis=1)[None, :]
    )
    return d2.argmin(axis=1)


def kmeans_groups(fingerprints: Sequence[int], similarity_bar: float,
                  max_iterations: int = KMEANS_MAX_ITERATIONS,
                  seed: Optional[int] = None) -> List[List[int]]:
    """
    Partition fingerprint positions with Lloyd's algorithm.

    Returns the non-empty clusters as lists of positions into fingerprints.
    There is no convergence guarantee beyond max_iterations.
    """
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be positive, got {max_iterations}.")
    n_points = len(fingerprints)
    if n_points == 0:
        return []

    rng = np.random.default_rng(seed)
    points = fingerprints_to_vectors(fingerprints)
    k = cluster_count(n_points, similarity_bar)
    logger.info("Clustering %d images into at most %d groups.", n_points, k)

    centers = points[rng.choice(n_points, size=k, replace=False)].copy()
    assignment = None
    for iteration in range(max_iterations):
        new_assignment = _assign(points, centers)
        if assignment is not None and np.array_equal(new_assignment, assignment):
            logger.debug("K-means converged after %d iterations.", iteration)
            break
        assignment = new_assignment
        for j in range(k):
            members = points[assignment == j]
            if len(members):
                centers[j] = members.mean(axis=0)
            else:
                centers[j] = points[rng.integers(n_points)]

    groups = [np.flatnonzero(assignment == j).tolist() for j in range(k)]
    return [group for group in groups if group]
