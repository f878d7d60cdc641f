#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Global configuration and constants for the photo de-duplication tool.
"""

import os
from typing import Tuple

# Fingerprint width
HASH_BITS = 64

# File type defaults
DEFAULT_EXTENSIONS: Tuple[str, ...] = ("jpg", "jpeg", "png", "jfif")

# On-disk artifacts owned by the tool
TRASH_DIRNAME = ".trash"
REASONS_FILENAME = ".duplicateReasons.txt"
GROUP_DIR_PREFIX = "group-"

# Default thresholds (can be overridden by CLI)
DEFAULT_SIMILARITY_BAR = 96
DEFAULT_TOP = 15
KMEANS_MAX_ITERATIONS = 20

# Selection and action defaults, by name
DEFAULT_KEEP_PREFERENCES: Tuple[str, ...] = ("Colorful", "HighestResolution", "Largest", "Newest")
DEFAULT_ACTION = "MoveToTrash"

# Processing defaults
DEFAULT_THREADS = os.cpu_count() or 1
