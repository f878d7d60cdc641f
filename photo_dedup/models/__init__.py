"""Data models for the photo de-duplication tool."""

from .fingerprint_record import FingerprintRecord
from .preferences import DuplicateAction, KeepPreference, parse_keep_preferences

__all__ = ['FingerprintRecord', 'DuplicateAction', 'KeepPreference', 'parse_keep_preferences']
