"""File-system operations for the photo de-duplication tool."""

from .files import FilesHelper

__all__ = ['FilesHelper']
