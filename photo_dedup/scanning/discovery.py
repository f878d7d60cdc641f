#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
File discovery logic for the photo de-duplication tool.
Lists candidate images under a folder; the tool's own trash folder is never scanned.
"""

import logging
import os
from typing import Iterable, List

from ..config import TRASH_DIRNAME
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


def normalize_extensions(extensions: Iterable[str]) -> List[str]:
    """Lower-case extensions without the leading dot; an empty list is an error."""
    normalized = [ext.strip().lstrip(".").lower() for ext in (extensions or []) if ext and ext.strip()]
    if not normalized:
        raise ConfigurationError("At least one extension should be provided for --extensions.")
    return normalized


def discover_images(path: str, recursive: bool, extensions: Iterable[str],
                    include_symlinks: bool) -> List[str]:
    """
    Find image files under path.

    Args:
        path: Folder to scan
        recursive: Descend into subfolders (trash folders are skipped)
        extensions: Accepted extensions, with or without the leading dot
        include_symlinks: Whether symbolic links count as images

    Returns:
        Sorted absolute paths of the matching files
    """
    wanted = set(normalize_extensions(extensions))
    root = os.path.abspath(path)
    if not os.path.isdir(root):
        raise FileNotFoundError(f"Folder {root} does not exist.")

    found = []
    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        # Prune in place so os.walk never enters trash folders
        dirnames[:] = [d for d in dirnames if d != TRASH_DIRNAME] if recursive else []
        if os.path.basename(dirpath) == TRASH_DIRNAME:
            continue
        for name in filenames:
            ext = os.path.splitext(name)[1].lstrip(".").lower()
            if ext not in wanted:
                continue
            full = os.path.join(dirpath, name)
            if not include_symlinks and os.path.islink(full):
                continue
            found.append(full)

    found.sort()
    logger.info("Found %d images in %s.", len(found), root)
    return found
