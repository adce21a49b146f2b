"""Tests for path sanitizing and safe file reading."""

from hypothesis import given, strategies as st

from structure_mapper.path_utils import is_file_accessible, read_file_safely, sanitize_file_path


class TestSanitizeFilePath:
    """Test removal of an erroneously appended .git suffix."""

    def test_strips_git_after_java(self):
        """Test the trailing .git suffix is removed after .java."""
        assert sanitize_file_path("Foo.java.git") == "Foo.java"
        assert sanitize_file_path("/repo/src/com/x/Foo.java.git") == "/repo/src/com/x/Foo.java"

    def test_leaves_other_paths_unchanged(self):
        """Test paths without the suffix are unchanged."""
        assert sanitize_file_path("Foo.java") == "Foo.java"
        assert sanitize_file_path("project.git") == "project.git"
        assert sanitize_file_path("") == ""


@given(path=st.text())
def test_sanitize_is_idempotent(path):
    """Applying the sanitizer twice equals applying it once."""
    once = sanitize_file_path(path)
    assert sanitize_file_path(once) == once


@given(stem=st.text(min_size=1))
def test_sanitize_restores_java_path(stem):
    """Test sanitizing always yields the plain .java path."""
    assert sanitize_file_path(stem + ".java.git") == stem + ".java"


class TestReadFileSafely:
    """Test reading through the sanitizer."""

    def test_reads_existing_file(self, tmp_path):
        """Test reading an existing file."""
        source = tmp_path / "Foo.java"
        source.write_text("class Foo {}", encoding="utf-8")

        assert read_file_safely(str(source)) == "class Foo {}"

    def test_reads_sanitized_path(self, tmp_path):
        """Test reading through a suffixed path."""
        source = tmp_path / "Foo.java"
        source.write_text("class Foo {}", encoding="utf-8")

        assert read_file_safely(str(source) + ".git") == "class Foo {}"

    def test_missing_file_returns_none(self, tmp_path):
        """Test a missing file yields None."""
        assert read_file_safely(str(tmp_path / "Missing.java")) is None

    def test_directory_is_not_accessible(self, tmp_path):
        """Test a directory yields None."""
        assert is_file_accessible(str(tmp_path)) is False
        assert read_file_safely(str(tmp_path)) is None

    def test_undecodable_file_returns_none(self, tmp_path):
        """Test a file that is not UTF-8 yields None."""
        source = tmp_path / "Binary.java"
        source.write_bytes(b"\xff\xfe\x00\x80class")

        assert read_file_safely(str(source)) is None
