#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Keep preferences and duplicate actions for the photo de-duplication tool.
"""

from enum import Enum
from typing import Iterable, List

from ..errors import ConfigurationError


class _NamedEnum(Enum):
    """Enum whose members are parsed from their display names, case-insensitively."""

    @classmethod
    def parse(cls, name: str):
        if isinstance(name, cls):
            return name
        wanted = str(name).strip().replace("-", "").replace("_", "").lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        choices = "|".join(member.value for member in cls)
        raise ConfigurationError(f"Unknown {cls.__name__} '{name}'. Available options: {choices}.")

    def __str__(self) -> str:
        return self.value


class KeepPreference(_NamedEnum):
    """Criteria for picking the image to keep from a duplicate group."""
    NEWEST = "Newest"
    OLDEST = "Oldest"
    LARGEST = "Largest"
    SMALLEST = "Smallest"
    HIGHEST_RESOLUTION = "HighestResolution"
    LOWEST_RESOLUTION = "LowestResolution"
    GRAYSCALE = "GrayScale"
    COLORFUL = "Colorful"


class DuplicateAction(_NamedEnum):
    """What to do with every non-representative member of a duplicate group."""
    NOTHING = "Nothing"
    DELETE = "Delete"
    MOVE_TO_TRASH = "MoveToTrash"
    MOVE_TO_TRASH_AND_CREATE_LINK = "MoveToTrashAndCreateLink"
    DELETE_AND_CREATE_LINK = "DeleteAndCreateLink"


def parse_keep_preferences(names: Iterable) -> List[KeepPreference]:
    """Parse a keep-preference chain, rejecting an empty one."""
    preferences = [KeepPreference.parse(name) for name in (names or [])]
    if not preferences:
        raise ConfigurationError("At least one preference should be provided for --keep.")
    return preferences
