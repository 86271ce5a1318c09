"""Tests for resolving attachment destinations."""

import logging
from pathlib import Path

from buildcontent.destinations import is_matchable, resolve_destinations


class TestResolveWithoutReferences:
    """Without summary references everything is written flat."""

    def test_every_name_maps_to_output_folder(self, tmp_path: Path):
        destinations = resolve_destinations([], ["out.coverage", "log.txt"], tmp_path)

        assert destinations == {
            "out.coverage": (tmp_path / "out.coverage",),
            "log.txt": (tmp_path / "log.txt",),
        }

    def test_duplicate_names_collapse(self, tmp_path: Path):
        destinations = resolve_destinations([], ["a.txt", "b.txt", "a.txt"], tmp_path)

        assert list(destinations) == ["a.txt", "b.txt"]


class TestResolveWithReferences:
    """Coverage files follow the summary references."""

    def test_round_trip_scenario(self, tmp_path: Path):
        reference = tmp_path / "run1" / "In" / "coverage" / "obj" / "out.coverage"

        destinations = resolve_destinations([reference], ["out.coverage"], tmp_path)

        assert destinations == {"out.coverage": (reference,)}

    def test_shared_coverage_gets_every_reference_in_order(self, tmp_path: Path):
        first = tmp_path / "a" / "In" / "x" / "shared.coverage"
        unrelated = tmp_path / "a" / "In" / "x" / "other.coverage"
        second = tmp_path / "b" / "In" / "y" / "shared.coverage"

        destinations = resolve_destinations(
            [first, unrelated, second], ["shared.coverage", "shared.coverage"], tmp_path
        )

        assert destinations["shared.coverage"] == (first, second)
        assert len(destinations) == 1

    def test_repeated_reference_paths_collapse(self, tmp_path: Path):
        reference = tmp_path / "run" / "In" / "x" / "out.coverage"

        destinations = resolve_destinations([reference, reference], ["out.coverage"], tmp_path)

        assert destinations == {"out.coverage": (reference,)}

    def test_plain_files_stay_flat(self, tmp_path: Path):
        reference = tmp_path / "run" / "In" / "log.txt"

        destinations = resolve_destinations([reference], ["log.txt"], tmp_path)

        assert destinations == {"log.txt": (tmp_path / "log.txt",)}

    def test_unreferenced_coverage_falls_back_to_flat(self, tmp_path: Path, caplog):
        reference = tmp_path / "run" / "In" / "known.coverage"

        with caplog.at_level(logging.WARNING, logger="buildcontent.destinations"):
            destinations = resolve_destinations([reference], ["orphan.coverage"], tmp_path)

        assert destinations == {"orphan.coverage": (tmp_path / "orphan.coverage",)}
        assert "orphan.coverage" in caplog.text

    def test_every_destination_list_is_non_empty(self, tmp_path: Path):
        references = [tmp_path / "r" / "In" / "a.coverage"]
        names = ["a.coverage", "b.coverage", "c.dll", "a.coverage"]

        destinations = resolve_destinations(references, names, tmp_path)

        assert all(len(paths) >= 1 for paths in destinations.values())


class TestIsMatchable:
    def test_coverage_extension(self):
        assert is_matchable("out.coverage")
        assert is_matchable("OUT.Coverage")
        assert not is_matchable("out.coveragexml")
        assert not is_matchable("coverage")
