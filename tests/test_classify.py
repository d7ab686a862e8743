"""Tests for test/doc file classification."""

import pytest

from devex.git.classify import ChangedFiles, is_doc_file, is_test_file


class TestIsTestFile:
    """Test test file detection."""

    @pytest.mark.parametrize(
        "path",
        [
            "src/app.test.ts",
            "src/app.spec.js",
            "src/__tests__/app.ts",
            "src/__test__/helpers.ts",
            "pkg/tests/test_models.py",
            "pkg/test/Fixture.java",
            "SRC/App.TEST.ts",
        ],
    )
    def test_matches(self, path):
        """Test paths recognised as tests."""
        assert is_test_file(path)

    @pytest.mark.parametrize("path", ["src/app.ts", "tests/test_models.py", "contest.py", "latest/notes.py"])
    def test_non_matches(self, path):
        """Test paths not recognised as tests."""
        # A top-level tests/ directory has no leading slash to match.
        assert not is_test_file(path)


class TestIsDocFile:
    """Test documentation file detection."""

    @pytest.mark.parametrize(
        "path",
        [
            "CHANGELOG.md",
            "guide.rst",
            "notes.txt",
            "README",
            "readme.markdown",
            "project/docs/index.html",
            "project/doc/api.html",
        ],
    )
    def test_matches(self, path):
        """Test paths recognised as documentation."""
        assert is_doc_file(path)

    @pytest.mark.parametrize("path", ["src/main.py", "docs/index.html", "src/readme.py"])
    def test_non_matches(self, path):
        """Test paths not recognised as documentation."""
        assert not is_doc_file(path)


class TestChangedFiles:
    """Test ChangedFiles class."""

    def test_counts_distinct_paths(self):
        """Test that repeated paths are counted once."""
        changed = ChangedFiles(["a.py", "a.py", "b.py"])
        assert changed.files_changed == 2
        assert len(changed) == 2
        assert "a.py" in changed

    def test_path_can_be_test_and_doc(self):
        """Test that a path can be both a test and a doc file."""
        changed = ChangedFiles(["pkg/tests/fixtures.txt"])
        assert changed.test_files_changed == 1
        assert changed.doc_files_changed == 1
        assert changed.files_changed == 1

    def test_repeated_test_path_counted_once(self):
        """Test that a test file touched twice counts once."""
        changed = ChangedFiles()
        changed.add("src/app.test.ts")
        changed.add("src/app.test.ts")
        changed.add("README.md")
        assert changed.test_files_changed == 1
        assert changed.doc_files_changed == 1
        assert changed.files_changed == 2
