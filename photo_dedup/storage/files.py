#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
File-system primitives for acting on duplicates: trash, links, collision-safe copy and move.
"""

import logging
import os
import shutil
import subprocess
import sys
from typing import Optional

from ..config import REASONS_FILENAME, TRASH_DIRNAME
from ..errors import LinkIntegrityError
from ..models.fingerprint_record import FingerprintRecord
from ..utils.path import ensure_dir, random_file_name

logger = logging.getLogger(__name__)


class FilesHelper:
    """File operations used by the de-duplication workflows."""

    @staticmethod
    def get_actual_file_path(path: str) -> str:
        """Follow a chain of symbolic links down to the real file."""
        return os.path.realpath(path, strict=True)

    def delete(self, path: str) -> None:
        os.remove(path)
        logger.info("Deleted %s.", path)

    def unique_destination(self, folder: str, file_name: str) -> str:
        """folder/file_name, or folder/<random>.<ext> when that name is taken."""
        destination = os.path.join(folder, file_name)
        while os.path.lexists(destination):
            logger.warning("File %s already exists. Will rename the file.", destination)
            destination = os.path.join(folder, random_file_name(file_name))
        return destination

    def move_to_trash(self, photo: FingerprintRecord, root: str, duplicate_source_file: str) -> str:
        """Move photo into root/.trash and record why in the reasons log."""
        trash_folder = os.path.join(root, TRASH_DIRNAME)
        ensure_dir(trash_folder)

        trash_path = os.path.join(trash_folder, os.path.basename(photo.physical_path))
        while os.path.lexists(trash_path):
            trash_path = os.path.join(trash_folder, random_file_name(photo.physical_path))

        shutil.move(photo.physical_path, trash_path)
        message = (f"The file {photo.physical_path} is moved here as {trash_path} "
                   f"because it's a duplicate of {duplicate_source_file}.")
        with open(os.path.join(trash_folder, REASONS_FILENAME), "a", encoding="utf-8", newline="\n") as f:
            f.write(message + "\n")

        logger.info("Moved %s to %s folder.", photo.physical_path, TRASH_DIRNAME)
        return trash_path

    def create_link(self, actual_file: str, virtual_file: str) -> None:
        """Create a relative symbolic link at virtual_file pointing at actual_file, then verify it."""
        virtual_dir = os.path.dirname(virtual_file)
        relative_actual_file = os.path.relpath(actual_file, virtual_dir)
        os.symlink(relative_actual_file, virtual_file)

        exists = os.path.exists(virtual_file)
        is_link = os.path.islink(virtual_file)
        target = os.path.realpath(virtual_file)
        if exists and is_link and target == os.path.realpath(actual_file):
            logger.info("Created a link from %s to %s.", virtual_file, actual_file)
            return

        size: Optional[int] = os.lstat(virtual_file).st_size if os.path.lexists(virtual_file) else None
        message = (f"Failed to create a link from {virtual_file} to {actual_file}. "
                   f"Detailed information: "
                   f"Virtual File: {virtual_file}, "
                   f"Actual File: {actual_file}, "
                   f"Relative Actual File: {relative_actual_file}, "
                   f"Virtual File Exists: {exists}, "
                   f"Virtual File Size: {size}, "
                   f"Virtual File is a link: {is_link}, "
                   f"Virtual File Target: {target}.")
        logger.error(message)
        raise LinkIntegrityError(message)

    def copy_to_folder(self, source_path: str, source_root: str, destination_root: str) -> str:
        """
        Copy a file to the same relative location under destination_root.

        Symbolic links are resolved to the real file first. Name collisions get a
        fresh random name in destination_root instead of an overwrite.
        """
        actual_file = self.get_actual_file_path(source_path)
        destination = os.path.join(destination_root, os.path.relpath(source_path, source_root))
        while os.path.lexists(destination):
            logger.warning("File %s already exists. Will rename the file.", destination)
            destination = os.path.join(destination_root, random_file_name(source_path))

        ensure_dir(os.path.dirname(destination))
        shutil.copy2(actual_file, destination)
        logger.info("Copied %s to %s.", actual_file, destination)
        return destination

    def overwrite(self, source_path: str, destination_path: str) -> None:
        shutil.copy2(self.get_actual_file_path(source_path), destination_path)

    def move_to_folder(self, source_path: str, folder: str) -> str:
        """Move a file into folder, renaming it when the name is taken by another file."""
        if os.path.dirname(os.path.abspath(source_path)) == os.path.abspath(folder):
            logger.debug("%s is already in %s.", source_path, folder)
            return source_path
        ensure_dir(folder)
        destination = self.unique_destination(folder, os.path.basename(source_path))
        shutil.move(source_path, destination)
        logger.debug("Moved %s to %s.", source_path, destination)
        return destination

    def preview_image(self, path: str) -> None:
        """Open the image with the platform viewer. Failures are logged, never raised."""
        try:
            if sys.platform.startswith("win"):
                subprocess.Popen(["explorer.exe", path])
            elif sys.platform == "darwin":
                subprocess.Popen(["open", path])
            else:
                subprocess.Popen(["xdg-open", path], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except Exception:
            logger.exception("Failed to open image %s.", path)
