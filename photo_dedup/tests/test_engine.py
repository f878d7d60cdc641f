#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Workflow tests for the de-duplication engine.
"""

import os
import sys

import pytest
from PIL import Image

from conftest import BLUE, GREEN, NEAR_RED, RED, make_image
from photo_dedup.config import GROUP_DIR_PREFIX, REASONS_FILENAME, TRASH_DIRNAME
from photo_dedup.errors import ConfigurationError, MissingSourceError

needs_symlinks = pytest.mark.skipif(sys.platform.startswith("win"),
                                    reason="symlinks need privileges on Windows")


def image_names(folder):
    return sorted(name for name in os.listdir(folder) if name.endswith(".png"))


@pytest.fixture
def pair(tmp_path):
    """p1 is small, p2 is larger and 2 bits away from p1."""
    p1 = make_image(tmp_path / "p1.png", RED, size=(10, 10))
    p2 = make_image(tmp_path / "p2.png", NEAR_RED, size=(20, 20))
    return tmp_path, p1, p2


class TestDedup:

    def test_moves_lower_resolution_duplicate_to_trash(self, engine, pair):
        root, p1, p2 = pair
        groups = engine.dedup(str(root), similarity_bar=90, action="MoveToTrash", threads=2)

        assert len(groups) == 1
        assert image_names(root) == ["p2.png"]
        assert image_names(root / TRASH_DIRNAME) == ["p1.png"]
        reasons = (root / TRASH_DIRNAME / REASONS_FILENAME).read_text(encoding="utf-8")
        assert p1 in reasons and p2 in reasons

    def test_strict_bar_finds_nothing(self, engine, pair):
        root, _, _ = pair
        assert engine.dedup(str(root), similarity_bar=99, threads=2) == []
        assert image_names(root) == ["p1.png", "p2.png"]
        assert not (root / TRASH_DIRNAME).exists()

    def test_unrelated_images_are_untouched(self, engine, pair):
        root, _, _ = pair
        make_image(root / "blue.png", BLUE)
        make_image(root / "green.png", GREEN)
        engine.dedup(str(root), similarity_bar=90, threads=2)
        assert image_names(root) == ["blue.png", "green.png", "p2.png"]

    def test_delete(self, engine, pair):
        root, _, _ = pair
        engine.dedup(str(root), similarity_bar=90, action="Delete")
        assert image_names(root) == ["p2.png"]
        assert not (root / TRASH_DIRNAME).exists()

    def test_nothing(self, engine, pair, caplog):
        root, _, _ = pair
        engine.dedup(str(root), similarity_bar=90, action="Nothing")
        assert image_names(root) == ["p1.png", "p2.png"]
        assert "No action taken" in caplog.text

    def test_keep_preference_chain_is_respected(self, engine, pair):
        root, _, _ = pair
        engine.dedup(str(root), similarity_bar=90, keep_preferences=["LowestResolution"], action="Delete")
        assert image_names(root) == ["p1.png"]

    @needs_symlinks
    def test_delete_and_create_link(self, engine, pair):
        root, p1, p2 = pair
        engine.dedup(str(root), similarity_bar=90, action="DeleteAndCreateLink")
        assert os.path.islink(p1)
        assert os.path.realpath(p1) == os.path.realpath(p2)
        assert not (root / TRASH_DIRNAME).exists()

    @needs_symlinks
    def test_move_to_trash_and_create_link(self, engine, pair):
        root, p1, p2 = pair
        engine.dedup(str(root), similarity_bar=90, action="MoveToTrashAndCreateLink")
        assert os.path.islink(p1)
        assert os.path.realpath(p1) == os.path.realpath(p2)
        assert image_names(root / TRASH_DIRNAME) == ["p1.png"]

    @needs_symlinks
    def test_links_are_not_deduplicated_again(self, engine, pair):
        root, p1, _ = pair
        engine.dedup(str(root), similarity_bar=90, action="DeleteAndCreateLink")
        assert engine.dedup(str(root), similarity_bar=90, action="Delete") == []
        assert os.path.islink(p1)

    def test_recursive_ignores_trash(self, engine, pair):
        root, _, _ = pair
        engine.dedup(str(root), similarity_bar=90, recursive=True)
        # The trashed copy must not be grouped again
        assert engine.dedup(str(root), similarity_bar=90, recursive=True) == []

    def test_missing_best_photo_aborts(self, engine, pair):
        root, p1, p2 = pair
        # The user removes the best photo while being asked to confirm
        engine.prompt = lambda _: os.path.exists(p2) and os.remove(p2)
        with pytest.raises(MissingSourceError):
            engine.dedup(str(root), similarity_bar=90, interactive=True)
        assert os.path.exists(p1)

    def test_interactive_previews_and_prompts(self, engine, pair):
        root, p1, p2 = pair
        prompts = []
        engine.prompt = prompts.append
        engine.dedup(str(root), similarity_bar=90, interactive=True, action="Nothing")
        previewed = [call.args[0] for call in engine.files.preview_image.call_args_list]
        assert previewed == [p2, p1]
        assert prompts == ["Press ENTER to preview duplicates.", "Press ENTER to do Nothing."]

    @pytest.mark.parametrize("kwargs", [
        {"similarity_bar": 101},
        {"keep_preferences": []},
        {"keep_preferences": ["Prettiest"]},
        {"action": "Shred"},
        {"extensions": []},
        {"threads": 0},
    ])
    def test_invalid_options_touch_nothing(self, engine, pair, kwargs):
        root, _, _ = pair
        with pytest.raises(ConfigurationError):
            engine.dedup(str(root), **{"similarity_bar": 90, **kwargs})
        assert image_names(root) == ["p1.png", "p2.png"]

    def test_thread_count_checked_before_scanning(self, engine, tmp_path):
        with pytest.raises(ConfigurationError):
            engine.dedup(str(tmp_path / "missing"), threads=0)


class TestDedupCopy:

    @pytest.fixture
    def folders(self, tmp_path):
        source, destination = tmp_path / "src", tmp_path / "dst"
        make_image(source / "red.png", RED, size=(30, 30))
        make_image(source / "red_small.png", NEAR_RED, size=(10, 10))
        make_image(source / "blue.png", BLUE)
        make_image(destination / "existing.png", RED)
        return source, destination

    def test_copies_only_missing_images(self, engine, folders):
        source, destination = folders
        copied, skipped = engine.dedup_copy(str(source), str(destination), similarity_bar=96)
        assert (copied, skipped) == (1, 1)
        assert image_names(destination) == ["blue.png", "existing.png"]
        assert image_names(source) == ["blue.png", "red.png", "red_small.png"]

    def test_second_run_copies_nothing(self, engine, folders):
        source, destination = folders
        engine.dedup_copy(str(source), str(destination), similarity_bar=96)
        assert engine.dedup_copy(str(source), str(destination), similarity_bar=96) == (0, 2)
        assert image_names(destination) == ["blue.png", "existing.png"]

    def test_source_duplicates_copy_once(self, engine, folders):
        source, _ = folders
        empty = source.parent / "empty"
        empty.mkdir()
        copied, skipped = engine.dedup_copy(str(source), str(empty), similarity_bar=96)
        assert (copied, skipped) == (2, 0)
        # The higher resolution red image is the one copied
        assert image_names(empty) == ["blue.png", "red.png"]

    def test_name_collision_is_renamed(self, engine, tmp_path):
        source, destination = tmp_path / "src", tmp_path / "dst"
        make_image(source / "a.png", RED)
        make_image(destination / "a.png", BLUE)
        assert engine.dedup_copy(str(source), str(destination)) == (1, 0)
        names = image_names(destination)
        assert len(names) == 2 and "a.png" in names
        with Image.open(destination / "a.png") as img:
            assert img.convert("RGB").getpixel((0, 0)) == BLUE


class TestDedupPatch:

    def test_better_source_overwrites_destination(self, engine, tmp_path):
        source = make_image(tmp_path / "src" / "a.png", RED, size=(40, 40))
        destination = make_image(tmp_path / "dst" / "a_small.png", NEAR_RED, size=(10, 10))
        make_image(tmp_path / "dst" / "blue.png", BLUE)

        patched = engine.dedup_patch(str(tmp_path / "src"), str(tmp_path / "dst"),
                                     keep_preferences=["HighestResolution"], similarity_bar=90)

        assert patched == 1
        with open(source, "rb") as s, open(destination, "rb") as d:
            assert s.read() == d.read()
        assert image_names(tmp_path / "dst") == ["a_small.png", "blue.png"]

    def test_worse_source_patches_nothing(self, engine, tmp_path):
        make_image(tmp_path / "src" / "a.png", RED, size=(10, 10))
        destination = make_image(tmp_path / "dst" / "a.png", NEAR_RED, size=(40, 40))
        before = open(destination, "rb").read()

        patched = engine.dedup_patch(str(tmp_path / "src"), str(tmp_path / "dst"),
                                     keep_preferences=["HighestResolution"], similarity_bar=90)

        assert patched == 0
        assert open(destination, "rb").read() == before

    def test_source_only_duplicates_are_left_alone(self, engine, tmp_path):
        make_image(tmp_path / "src" / "a.png", RED, size=(40, 40))
        make_image(tmp_path / "src" / "b.png", NEAR_RED, size=(10, 10))
        (tmp_path / "dst").mkdir()
        assert engine.dedup_patch(str(tmp_path / "src"), str(tmp_path / "dst"), similarity_bar=90) == 0
        assert image_names(tmp_path / "src") == ["a.png", "b.png"]


class TestClusterDistribute:

    @pytest.fixture
    def root(self, tmp_path):
        make_image(tmp_path / "red.png", RED)
        make_image(tmp_path / "red2.png", NEAR_RED)
        make_image(tmp_path / "blue.png", BLUE)
        return tmp_path

    def test_threshold_groups(self, engine, root):
        folders = engine.cluster_distribute(str(root), similarity_bar=90)
        assert [os.path.basename(f) for f in folders] == [f"{GROUP_DIR_PREFIX}1", f"{GROUP_DIR_PREFIX}2"]
        assert image_names(root) == []
        contents = sorted(image_names(f) for f in folders)
        assert contents == [["blue.png"], ["red.png", "red2.png"]]

    def test_kmeans_moves_every_image(self, engine, root):
        folders = engine.cluster_distribute(str(root), similarity_bar=90, method="kmeans")
        assert image_names(root) == []
        assert sorted(name for f in folders for name in image_names(f)) == ["blue.png", "red.png", "red2.png"]
        assert all(os.path.basename(f).startswith(GROUP_DIR_PREFIX) for f in folders)

    def test_existing_group_folder_is_reused(self, engine, root):
        make_image(root / f"{GROUP_DIR_PREFIX}1" / "red.png", GREEN)
        folders = engine.cluster_distribute(str(root), similarity_bar=90)
        moved = sum(len(image_names(f)) for f in folders)
        assert moved == 4

    def test_recursive_rerun_keeps_file_names(self, engine, tmp_path):
        make_image(tmp_path / "a.png", RED)
        make_image(tmp_path / "b.png", NEAR_RED)
        group = tmp_path / f"{GROUP_DIR_PREFIX}1"

        engine.cluster_distribute(str(tmp_path), similarity_bar=90, recursive=True)
        assert image_names(group) == ["a.png", "b.png"]

        folders = engine.cluster_distribute(str(tmp_path), similarity_bar=90, recursive=True)
        assert folders == [str(group)]
        assert image_names(group) == ["a.png", "b.png"]

    def test_unknown_method(self, engine, root):
        with pytest.raises(ConfigurationError):
            engine.cluster_distribute(str(root), method="spectral")


class TestCompareAndTop:

    def test_compare_pairs(self, engine, tmp_path):
        a = make_image(tmp_path / "a.png", RED)
        b = make_image(tmp_path / "b.png", NEAR_RED)
        c = make_image(tmp_path / "c.png", BLUE)
        results = engine.compare([a, b, c])
        assert [(x.physical_path, y.physical_path) for x, y, _ in results] == [(a, b), (a, c), (b, c)]
        assert results[0][2] == pytest.approx(62 / 64)
        assert results[1][2] == 0.0

    def test_compare_needs_two_images(self, engine, tmp_path):
        a = make_image(tmp_path / "a.png")
        with pytest.raises(ConfigurationError):
            engine.compare([a, str(tmp_path / "missing.png")])

    def test_dup_top(self, engine, tmp_path):
        query = make_image(tmp_path / "query.png", RED)
        folder = tmp_path / "lib"
        make_image(folder / "same.png", RED)
        make_image(folder / "near.png", NEAR_RED)
        make_image(folder / "far.png", BLUE)

        top = engine.dup_top(query, str(folder), top=2)

        assert [os.path.basename(r.physical_path) for r, _ in top] == ["same.png", "near.png"]
        assert [ratio for _, ratio in top] == [1.0, pytest.approx(62 / 64)]

    @pytest.mark.parametrize("top", [0, -1])
    def test_dup_top_rejects_non_positive_top(self, engine, tmp_path, top):
        query = make_image(tmp_path / "query.png", RED)
        make_image(tmp_path / "lib" / "same.png", RED)
        with pytest.raises(ConfigurationError, match="--top"):
            engine.dup_top(query, str(tmp_path / "lib"), top=top)
