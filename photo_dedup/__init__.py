"""Photo De-duplication Tool - perceptual-hash based near-duplicate finder."""

__version__ = "1.0.0"
__author__ = "Photo Dedup Team"

# Import key classes for convenient top-level access
from .engine import DedupEngine
from .errors import ConfigurationError, DedupError, LinkIntegrityError, MissingSourceError
from .grouping import BestPhotoSelector, DisjointSetUnion, VPTree, build_image_groups, kmeans_groups
from .models import DuplicateAction, FingerprintRecord, KeepPreference
from .scanning import ImageHasher, discover_images
from .storage import FilesHelper

__all__ = [
    # Core classes
    'DedupEngine',
    'ImageHasher',
    'FilesHelper',
    'BestPhotoSelector',

    # Indexing and grouping
    'VPTree',
    'DisjointSetUnion',
    'build_image_groups',
    'kmeans_groups',
    'discover_images',

    # Data models
    'FingerprintRecord',
    'KeepPreference',
    'DuplicateAction',

    # Errors
    'DedupError',
    'ConfigurationError',
    'LinkIntegrityError',
    'MissingSourceError',

    # Package metadata
    '__version__',
    '__author__'
]
