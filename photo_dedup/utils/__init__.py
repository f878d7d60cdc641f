"""Utility functions for the photo de-duplication tool."""

from .path import ensure_dir, random_file_name

__all__ = ['ensure_dir', 'random_file_name']
