#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
De-duplication workflows for the photo de-duplication tool.
Coordinates scanning, grouping, best-photo selection and the action on every duplicate.
"""

import logging
import os
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .config import (
    DEFAULT_ACTION, DEFAULT_EXTENSIONS, DEFAULT_KEEP_PREFERENCES, DEFAULT_SIMILARITY_BAR,
    DEFAULT_THREADS, DEFAULT_TOP, GROUP_DIR_PREFIX,
)
from .errors import ConfigurationError, MissingSourceError
from .grouping.kmeans import kmeans_groups
from .grouping.selector import BestPhotoSelector
from .grouping.similarity import (
    build_image_groups, build_image_tree, max_distance_for, validate_similarity_bar,
)
from .models.fingerprint_record import FingerprintRecord
from .models.preferences import DuplicateAction, parse_keep_preferences
from .scanning.discovery import discover_images, normalize_extensions
from .scanning.hasher import ImageHasher, validate_threads
from .storage.files import FilesHelper

logger = logging.getLogger(__name__)

CLUSTER_METHODS = ("threshold", "kmeans")


class DedupEngine:
    """Runs one de-duplication workflow per call. Not meant to be shared between concurrent runs."""

    def __init__(self, hasher: Optional[ImageHasher] = None, files: Optional[FilesHelper] = None,
                 selector: Optional[BestPhotoSelector] = None,
                 prompt: Callable[[str], str] = input, seed: Optional[int] = None):
        self.hasher = hasher or ImageHasher()
        self.files = files or FilesHelper()
        self.selector = selector or BestPhotoSelector()
        self.prompt = prompt
        self.seed = seed

    def dedup(self, path: str, similarity_bar: float = DEFAULT_SIMILARITY_BAR,
              recursive: bool = False, keep_preferences: Sequence = DEFAULT_KEEP_PREFERENCES,
              action=DEFAULT_ACTION, interactive: bool = False,
              extensions: Iterable[str] = DEFAULT_EXTENSIONS, verbose: bool = False,
              threads: int = DEFAULT_THREADS) -> List[List[FingerprintRecord]]:
        """
        Remove duplicate images from a folder.

        Args:
            path: Folder to de-duplicate
            similarity_bar: 0 - 100, images at least this similar are duplicates. Suggested 96-99.
            recursive: Include subfolders (the trash folder is always skipped)
            keep_preferences: Ordered criteria deciding which image of a group to keep
            action: What to do with every other image of the group
            interactive: Preview and wait for ENTER before each step
            extensions: File extensions to consider
            verbose: Log the full configuration and hide the progress bar
            threads: Worker count for fingerprinting

        Returns:
            The duplicate groups that were acted on
        """
        keep = parse_keep_preferences(keep_preferences)
        action = DuplicateAction.parse(action)
        extensions = normalize_extensions(extensions)
        validate_similarity_bar(similarity_bar)
        threads = validate_threads(threads)
        root = os.path.abspath(path)

        if verbose:
            logger.info("Start de-duplicating images in %s. Minimum similarity bar is %s. Recursive: %s. "
                        "Keep: %s. Action: %s. Interactive: %s. Extensions: %s.",
                        root, similarity_bar, recursive, ", ".join(map(str, keep)), action,
                        interactive, ", ".join(extensions))
        else:
            logger.info("Start de-duplicating images in %s.", root)

        # Symbolic links are not duplicates; de-duplicating them saves no space
        paths = discover_images(root, recursive, extensions, include_symlinks=False)
        records = self.hasher.map_images(paths, show_progress=not verbose, threads=threads)
        groups = build_image_groups(records, similarity_bar, ignore_singletons=True, seed=self.seed)

        for group in groups:
            best = self.selector.find_best_photo(group, keep)
            logger.info("Found %d duplicates pictures with image %s", len(group) - 1, best.physical_path)

            if interactive:
                self.files.preview_image(best.physical_path)
                logger.info("Grayscale %s. Resolution %d. Size %d. File name %s is previewing as best photo.",
                            best.is_grayscale, best.resolution_px, best.size_bytes, best.physical_path)
                self.prompt("Press ENTER to preview duplicates.")

            for photo in group:
                if photo is best:
                    continue
                if interactive:
                    logger.info("Grayscale %s. Resolution %d. Size %d. File name %s is previewing as duplicate "
                                "photo with similarity %.2f%%.",
                                photo.is_grayscale, photo.resolution_px, photo.size_bytes,
                                photo.physical_path, photo.similarity_ratio(best) * 100)
                    self.files.preview_image(photo.physical_path)
                    self.prompt(f"Press ENTER to do {action}.")
                self.apply_action(action, photo, best, root)

        return groups

    def apply_action(self, action: DuplicateAction, photo: FingerprintRecord,
                     best: FingerprintRecord, root: str) -> None:
        """Act on one duplicate. The representative must still exist."""
        if action is DuplicateAction.NOTHING:
            logger.warning("No action taken. If you want to delete or move the duplicate photos, "
                           "please specify the action with --action.")
            return

        if not os.path.exists(best.physical_path):
            raise MissingSourceError(
                f"Best photo {best.physical_path} no longer exists; refusing to act on {photo.physical_path}.")

        if action is DuplicateAction.DELETE:
            self.files.delete(photo.physical_path)
        elif action is DuplicateAction.MOVE_TO_TRASH:
            self.files.move_to_trash(photo, root, best.physical_path)
        elif action is DuplicateAction.MOVE_TO_TRASH_AND_CREATE_LINK:
            self.files.move_to_trash(photo, root, best.physical_path)
            self.files.create_link(best.physical_path, photo.physical_path)
        elif action is DuplicateAction.DELETE_AND_CREATE_LINK:
            self.files.delete(photo.physical_path)
            self.files.create_link(best.physical_path, photo.physical_path)
            logger.info("Deleted %s and created a link.", photo.physical_path)
        else:
            raise ValueError(f"Unsupported duplicate action: {action!r}")

    def dedup_copy(self, source: str, destination: str,
                   similarity_bar: float = DEFAULT_SIMILARITY_BAR, recursive: bool = False,
                   keep_preferences: Sequence = DEFAULT_KEEP_PREFERENCES, interactive: bool = False,
                   extensions: Iterable[str] = DEFAULT_EXTENSIONS, verbose: bool = False,
                   threads: int = DEFAULT_THREADS) -> Tuple[int, int]:
        """
        Copy images from source to destination, skipping any already present there.

        Only the best photo of every source group is considered. Returns (copied, skipped).
        """
        keep = parse_keep_preferences(keep_preferences)
        extensions = normalize_extensions(extensions)
        max_distance = max_distance_for(similarity_bar)
        threads = validate_threads(threads)
        source_root, destination_root = os.path.abspath(source), os.path.abspath(destination)

        if verbose:
            logger.info("Start copying without duplicate images in %s. Minimum similarity bar is %s. "
                        "Recursive: %s. Action: Copy. Interactive: %s. Extensions: %s.",
                        source_root, similarity_bar, recursive, interactive, ", ".join(extensions))
        else:
            logger.info("Start copying without duplicate images in %s.", source_root)

        # Copy the real files behind source links; a copy duplicating a destination link is fine
        source_paths = discover_images(source_root, recursive, extensions, include_symlinks=True)
        destination_paths = discover_images(destination_root, recursive, extensions, include_symlinks=False)
        source_records = self.hasher.map_images(source_paths, show_progress=not verbose, threads=threads)
        destination_records = self.hasher.map_images(destination_paths, show_progress=not verbose,
                                                     threads=threads)

        source_groups = build_image_groups(source_records, similarity_bar, ignore_singletons=False,
                                           seed=self.seed)
        destination_tree = build_image_tree(destination_records, seed=self.seed)

        logger.info("Copying images...")
        copied = skipped = 0
        for group in source_groups:
            best = self.selector.find_best_photo(group, keep)
            hits = destination_tree.search_within(best, max_distance)
            if hits:
                duplicate = hits[0][0]
                skipped += 1
                logger.debug("Found a source image %s is a duplicate of %s. Will skip copying.",
                             best.physical_path, duplicate.physical_path)
                if interactive:
                    self.files.preview_image(best.physical_path)
                    self.files.preview_image(duplicate.physical_path)
                    self.prompt("Press ENTER to continue.")
                continue

            logger.info("Copying %s to %s.", best.physical_path, destination_root)
            if interactive:
                self.files.preview_image(best.physical_path)
                self.prompt(f"Press ENTER to copy the file from {best.physical_path} to {destination_root}.")
            self.files.copy_to_folder(best.physical_path, source_root, destination_root)
            copied += 1

        logger.info("In the source path there are %d images, grouped with %d groups. "
                    "%d images are copied and %d images are skipped.",
                    len(source_records), len(source_groups), copied, skipped)
        return copied, skipped

    def dedup_patch(self, source: str, destination: str, recursive: bool = False,
                    similarity_bar: float = DEFAULT_SIMILARITY_BAR,
                    keep_preferences: Sequence = DEFAULT_KEEP_PREFERENCES,
                    extensions: Iterable[str] = DEFAULT_EXTENSIONS, verbose: bool = False,
                    threads: int = DEFAULT_THREADS) -> int:
        """
        Overwrite destination images with better source duplicates.

        Source and destination are grouped as one pool. When a group's best photo
        lives in source, every destination member of the group is overwritten with
        it. Neither side is de-duplicated on its own. Returns the number of patched files.
        """
        keep = parse_keep_preferences(keep_preferences)
        extensions = normalize_extensions(extensions)
        validate_similarity_bar(similarity_bar)
        threads = validate_threads(threads)
        source_root, destination_root = os.path.abspath(source), os.path.abspath(destination)

        if verbose:
            logger.info("Start patching images in %s to %s. Minimum similarity bar is %s. Extensions: %s.",
                        source_root, destination_root, similarity_bar, ", ".join(extensions))
        else:
            logger.info("Start patching images in %s to %s.", source_root, destination_root)

        # Destination links are never patched
        source_paths = discover_images(source_root, recursive, extensions, include_symlinks=True)
        destination_paths = discover_images(destination_root, recursive, extensions, include_symlinks=False)
        source_side = set(source_paths)
        destination_side = set(destination_paths) - source_side

        # One pipeline call keeps ids dense over the pooled records
        records = self.hasher.map_images(source_paths + [p for p in destination_paths if p in destination_side],
                                         show_progress=not verbose, threads=threads)
        groups = build_image_groups(records, similarity_bar, ignore_singletons=True, seed=self.seed)
        logger.info("Found %d duplicate groups and totally %d duplicate pictures in source and "
                    "destination folders.", len(groups), sum(len(g) for g in groups))
        logger.info("Patching images...")

        patched = 0
        for group in groups:
            best = self.selector.find_best_photo(group, keep)
            if best.physical_path not in source_side:
                continue
            for image in group:
                if image.physical_path not in destination_side:
                    continue
                logger.info("Patching %s -> %s", best.physical_path, image.physical_path)
                self.files.overwrite(best.physical_path, image.physical_path)
                patched += 1

        logger.info("In the source path there are %d images, grouped with %d groups. %d images are patched.",
                    len(records), len(groups), patched)
        return patched

    def cluster_distribute(self, path: str, similarity_bar: float = DEFAULT_SIMILARITY_BAR,
                           recursive: bool = False, interactive: bool = False,
                           extensions: Iterable[str] = DEFAULT_EXTENSIONS, verbose: bool = False,
                           threads: int = DEFAULT_THREADS, method: str = "threshold") -> List[str]:
        """
        Move every image of a folder into group-<n> subfolders by similarity.

        method "threshold" groups by the similarity bar and keeps singletons as
        their own groups; "kmeans" clusters coarsely. Returns the group folders
        in creation order.
        """
        if method not in CLUSTER_METHODS:
            raise ConfigurationError(f"Unknown cluster method '{method}'. Available options: "
                                     f"{'|'.join(CLUSTER_METHODS)}.")
        extensions = normalize_extensions(extensions)
        validate_similarity_bar(similarity_bar)
        threads = validate_threads(threads)
        root = os.path.abspath(path)

        logger.info("Start distributing images in %s into groups with %s grouping.", root, method)

        paths = discover_images(root, recursive, extensions, include_symlinks=False)
        records = self.hasher.map_images(paths, show_progress=not verbose, threads=threads)

        if method == "kmeans":
            positions = kmeans_groups([r.fingerprint for r in records], similarity_bar, seed=self.seed)
            groups = [[records[i] for i in group] for group in positions]
        else:
            groups = build_image_groups(records, similarity_bar, ignore_singletons=False, seed=self.seed)

        folders = []
        for number, group in enumerate(groups, start=1):
            folder = os.path.join(root, f"{GROUP_DIR_PREFIX}{number}")
            if interactive:
                for image in group:
                    self.files.preview_image(image.physical_path)
                self.prompt(f"Press ENTER to move {len(group)} images to {folder}.")
            for image in group:
                self.files.move_to_folder(image.physical_path, folder)
            folders.append(folder)
            logger.info("Moved %d images to %s.", len(group), folder)

        logger.info("Distributed %d images into %d groups.", len(records), len(folders))
        return folders

    def compare(self, paths: Sequence[str],
                threads: int = DEFAULT_THREADS) -> List[Tuple[FingerprintRecord, FingerprintRecord, float]]:
        """Pairwise similarity ratios between images, in input order."""
        threads = validate_threads(threads)
        physical_paths = [os.path.abspath(p) for p in paths]
        physical_paths = [p for p in physical_paths if os.path.isfile(p)]
        if len(physical_paths) < 2:
            raise ConfigurationError("At least two images should be provided for comparison.")

        records = self.hasher.map_images(physical_paths, threads=threads)
        order = {p: i for i, p in enumerate(physical_paths)}
        records.sort(key=lambda r: order[r.physical_path])
        if len(records) < 2:
            raise ConfigurationError("At least two readable images should be provided for comparison.")

        results = []
        for i, first in enumerate(records):
            for second in records[i + 1:]:
                results.append((first, second, first.similarity_ratio(second)))
        return results

    def dup_top(self, image: str, folder: str, top: int = DEFAULT_TOP, recursive: bool = False,
                extensions: Iterable[str] = DEFAULT_EXTENSIONS, verbose: bool = False,
                threads: int = DEFAULT_THREADS) -> List[Tuple[FingerprintRecord, float]]:
        """The top images in folder most similar to image, most similar first."""
        extensions = normalize_extensions(extensions)
        threads = validate_threads(threads)
        if top < 1:
            raise ConfigurationError(f"--top must be at least 1, got {top}.")
        source = self.hasher.map_image(os.path.abspath(image))
        paths = discover_images(folder, recursive, extensions, include_symlinks=False)
        records = self.hasher.map_images(paths, show_progress=not verbose, threads=threads)

        ranked = sorted(((r, r.similarity_ratio(source)) for r in records),
                        key=lambda pair: pair[1], reverse=True)
        return ranked[:top]
