"""
Unit tests for the alias table builder.
"""

import tempfile
from pathlib import Path

import pytest

from alias_sorter.aliases import generate_aliases, sort_aliases, split_aliases
from alias_sorter.types import DuplicateAliasError


def make_folders(base: Path, *names: str) -> None:
    """Create one empty subfolder per name under base."""
    for name in names:
        (base / name).mkdir()


class TestSplitAliases:
    """Tests for split_aliases function."""

    def test_single_name_lowercased(self):
        assert split_aliases("Star Wars") == ["star wars"]

    def test_comma_separated(self):
        """Each comma segment becomes a trimmed alias."""
        assert split_aliases("Movies, Films") == ["movies", "films"]

    def test_empty_segments_dropped(self):
        assert split_aliases("TV,, Series ,") == ["tv", "series"]

    def test_whitespace_only_name(self):
        assert split_aliases("   ") == []


class TestGenerateAliases:
    """Tests for generate_aliases function."""

    def test_single_folder(self):
        with tempfile.TemporaryDirectory() as tmp:
            make_folders(Path(tmp), "Music")

            aliases = generate_aliases(tmp)

            assert dict(aliases) == {"music": str(Path(tmp) / "Music")}

    def test_comma_folder_maps_all_aliases_to_same_dir(self):
        """'Movies, Films' yields two aliases for one folder."""
        with tempfile.TemporaryDirectory() as tmp:
            make_folders(Path(tmp), "Movies, Films")
            folder = str(Path(tmp) / "Movies, Films")

            aliases = generate_aliases(tmp)

            assert dict(aliases) == {"movies": folder, "films": folder}

    def test_mixed_folders(self):
        with tempfile.TemporaryDirectory() as tmp:
            make_folders(Path(tmp), "A", "B,C")

            aliases = generate_aliases(tmp)

            assert set(aliases) == {"a", "b", "c"}
            assert aliases["b"] == aliases["c"] == str(Path(tmp) / "B,C")

    def test_files_are_ignored(self):
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            make_folders(base, "Docs")
            (base / "notes.txt").write_text("content")

            aliases = generate_aliases(tmp)

            assert list(aliases) == ["docs"]

    def test_nested_folders_are_ignored(self):
        """Only immediate subfolders define aliases."""
        with tempfile.TemporaryDirectory() as tmp:
            base = Path(tmp)
            (base / "Docs" / "Inner").mkdir(parents=True)

            aliases = generate_aliases(tmp)

            assert list(aliases) == ["docs"]

    def test_empty_target_gives_empty_table(self):
        with tempfile.TemporaryDirectory() as tmp:
            assert len(generate_aliases(tmp)) == 0

    def test_duplicate_across_folders_raises(self):
        """'Movies' and 'movies, TV' both claim 'movies'."""
        with tempfile.TemporaryDirectory() as tmp:
            make_folders(Path(tmp), "Movies", "movies, TV")

            with pytest.raises(DuplicateAliasError) as exc_info:
                generate_aliases(tmp)

            assert exc_info.value.alias == "movies"
            assert "movies" in str(exc_info.value)

    def test_duplicate_within_folder_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            make_folders(Path(tmp), "tv, TV")

            with pytest.raises(DuplicateAliasError):
                generate_aliases(tmp)

    def test_duplicate_is_a_value_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            make_folders(Path(tmp), "Books", "books, comics")

            with pytest.raises(ValueError):
                generate_aliases(tmp)

    def test_table_is_read_only(self):
        with tempfile.TemporaryDirectory() as tmp:
            make_folders(Path(tmp), "Music")

            aliases = generate_aliases(tmp)

            with pytest.raises(TypeError):
                aliases["other"] = tmp

    def test_nonexistent_raises(self):
        with pytest.raises(FileNotFoundError):
            generate_aliases("/nonexistent/path/that/does/not/exist")

    def test_file_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "file.txt"
            path.write_text("content")

            with pytest.raises(NotADirectoryError):
                generate_aliases(path)


class TestSortAliases:
    """Tests for sort_aliases function."""

    def test_longest_first(self):
        table = {"wars": "/a", "star wars": "/b", "tv": "/c"}
        assert sort_aliases(table) == ["star wars", "wars", "tv"]

    def test_ties_are_alphabetical(self):
        table = {"tv": "/a", "ab": "/b", "zz": "/c"}
        assert sort_aliases(table) == ["ab", "tv", "zz"]
