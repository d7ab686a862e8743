"""File path categorization shared by the local and GitHub collectors."""

from typing import Iterable, Set

TEST_MARKERS = (".test.", ".spec.", "__test__", "__tests__", "/test/", "/tests/")
DOC_SUFFIXES = (".md", ".rst", ".txt")
DOC_PREFIXES = ("readme",)
DOC_MARKERS = ("/docs/", "/doc/")


def is_test_file(path: str) -> bool:
    """Check if a file path looks like a test file."""
    lower = path.lower()
    return any(marker in lower for marker in TEST_MARKERS)


def is_doc_file(path: str) -> bool:
    """Check if a file path looks like documentation."""
    lower = path.lower()
    return (
        lower.endswith(DOC_SUFFIXES)
        or lower.startswith(DOC_PREFIXES)
        or any(marker in lower for marker in DOC_MARKERS)
    )


class ChangedFiles:
    """Distinct set of touched paths, with test/doc subsets.

    Counts are of distinct paths, not of occurrences across commits. A path
    can land in both the test and doc subsets.
    """

    def __init__(self, paths: Iterable[str] = ()):
        self._paths: Set[str] = set()
        self._test_paths: Set[str] = set()
        self._doc_paths: Set[str] = set()
        self.update(paths)

    def add(self, path: str) -> None:
        self._paths.add(path)
        if is_test_file(path):
            self._test_paths.add(path)
        if is_doc_file(path):
            self._doc_paths.add(path)

    def update(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.add(path)

    @property
    def files_changed(self) -> int:
        return len(self._paths)

    @property
    def test_files_changed(self) -> int:
        return len(self._test_paths)

    @property
    def doc_files_changed(self) -> int:
        return len(self._doc_paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, path: object) -> bool:
        return path in self._paths
