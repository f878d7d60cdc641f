#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Path utility functions for the photo de-duplication tool.
"""

import os
import uuid
from pathlib import Path


def ensure_dir(p: Path) -> None:
    """Ensure directory exists, creating it if necessary."""
    Path(p).mkdir(parents=True, exist_ok=True)


def random_file_name(like: str) -> str:
    """A fresh unique file name carrying the extension of like."""
    return f"{uuid.uuid4()}{os.path.splitext(like)[1]}"
