"""Scanning and fingerprinting modules for the photo de-duplication tool."""

from .discovery import discover_images, normalize_extensions
from .fingerprint import is_image_grayscale, perceptual_hash, probe_grayscale
from .hasher import ImageHasher, validate_threads

__all__ = [
    'ImageHasher',
    'validate_threads',
    'discover_images',
    'normalize_extensions',
    'is_image_grayscale',
    'perceptual_hash',
    'probe_grayscale',
]
