"""Similarity indexing and grouping for the photo de-duplication tool."""

from .dsu import DisjointSetUnion
from .kmeans import cluster_count, kmeans_groups
from .selector import BestPhotoSelector
from .similarity import build_image_groups, build_image_tree, hamming_distance, max_distance_for
from .vptree import VPTree

__all__ = [
    'VPTree',
    'DisjointSetUnion',
    'BestPhotoSelector',
    'build_image_groups',
    'build_image_tree',
    'hamming_distance',
    'max_distance_for',
    'cluster_count',
    'kmeans_groups',
]
