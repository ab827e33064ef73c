"""Domain models for single-file git diffs.

Parse-once pattern: raw `git diff` output for one file is parsed into a
DiffDocument at the boundary. Each Hunk keeps its exact source text so that
any subset of hunks can be turned back into a patch with build_patch().
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

HUNK_HEADER_PATTERN = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
DIFF_GIT_PATH_PATTERN = re.compile(r"diff --git a/(.+?) b/")


# ============================================================
# Domain Models
# ============================================================


@dataclass(frozen=True)
class HunkRange:
    """Line ranges parsed from a hunk marker (@@ -a,b +c,d @@).

    An omitted count means exactly one line, per unified diff convention.
    """

    old_start: int
    old_count: int
    new_start: int
    new_count: int

    @classmethod
    def from_marker(cls, line: str) -> HunkRange | None:
        """Parse a hunk marker line.

        Args:
            line: A single diff line

        Returns:
            HunkRange if the line is a hunk marker, None otherwise
        """
        match = HUNK_HEADER_PATTERN.match(line)
        if not match:
            return None
        return cls(
            old_start=int(match.group(1)),
            old_count=int(match.group(2)) if match.group(2) is not None else 1,
            new_start=int(match.group(3)),
            new_count=int(match.group(4)) if match.group(4) is not None else 1,
        )


@dataclass(frozen=True)
class Hunk:
    """A single contiguous change block from a diff.

    Attributes:
        index: 0-based position in the parsed document (valid only within one parse)
        header_line: The @@ marker line
        content: Marker line plus every hunk line, always ending with a newline
        new_start: First line in the new file
        new_count: Number of lines in the new file
        old_start: First line in the old file
        old_count: Number of lines in the old file
    """

    index: int
    header_line: str
    content: str
    new_start: int
    new_count: int
    old_start: int = 1
    old_count: int = 1

    def to_dict(self) -> dict:
        """Convert hunk to dictionary for JSON serialization."""
        return {
            "index": self.index,
            "header": self.header_line,
            "content": self.content,
            "new_start": self.new_start,
            "new_count": self.new_count,
            "old_start": self.old_start,
            "old_count": self.old_count,
        }

    @property
    def new_end(self) -> int:
        """Last line of the hunk in the new file."""
        return self.new_start + self.new_count - 1


@dataclass
class _BeforeFirstHunk:
    """Scan state: still reading header lines."""

    header_lines: list[str] = field(default_factory=list)


@dataclass
class _InsideHunk:
    """Scan state: accumulating lines of an open hunk."""

    header_line: str
    hunk_range: HunkRange
    lines: list[str]

    def finalize(self, index: int) -> Hunk:
        content = "\n".join(self.lines)
        # A trailing empty element means the input already ended with a newline
        if self.lines[-1] != "":
            content += "\n"
        return Hunk(
            index=index,
            header_line=self.header_line,
            content=content,
            new_start=self.hunk_range.new_start,
            new_count=self.hunk_range.new_count,
            old_start=self.hunk_range.old_start,
            old_count=self.hunk_range.old_count,
        )


@dataclass(frozen=True)
class DiffDocument:
    """A parsed single-file diff: header lines plus ordered hunks.

    Use from_diff_content() to parse raw `git diff -- <path>` output.
    Documents are never mutated; a fresh one is parsed on every fetch.
    """

    header: str
    file_path: str
    hunks: tuple[Hunk, ...] = ()

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_diff_content(
        cls,
        diff_content: str,
        fallback_path: str | None = None,
    ) -> DiffDocument | None:
        """Parse raw diff output into a document of hunks.

        Lines before the first hunk marker form the header. Once a marker
        has been seen, every following line belongs to a hunk, even if it
        looks like a header line.

        Args:
            diff_content: Raw output of git diff for a single file
            fallback_path: Path used when the diff --git line is missing or unparseable

        Returns:
            DiffDocument, or None if the input is blank and has no hunks
        """
        file_path = fallback_path or ""
        path_found = False
        header_lines: list[str] = []
        hunks: list[Hunk] = []
        state: _BeforeFirstHunk | _InsideHunk = _BeforeFirstHunk(header_lines)

        for line in diff_content.split("\n"):
            hunk_range = HunkRange.from_marker(line)

            if hunk_range is not None:
                if isinstance(state, _InsideHunk):
                    hunks.append(state.finalize(len(hunks)))
                state = _InsideHunk(header_line=line, hunk_range=hunk_range, lines=[line])

            elif isinstance(state, _InsideHunk):
                state.lines.append(line)

            else:
                state.header_lines.append(line)
                if not path_found and line.startswith("diff --git"):
                    match = DIFF_GIT_PATH_PATTERN.match(line)
                    if match:
                        file_path = match.group(1)
                        path_found = True

        if isinstance(state, _InsideHunk):
            hunks.append(state.finalize(len(hunks)))

        if not hunks and not diff_content.strip():
            return None

        return cls(header="\n".join(header_lines), file_path=file_path, hunks=tuple(hunks))

    def to_dict(self) -> dict:
        """Convert document to dictionary for JSON serialization."""
        return {
            "file_path": self.file_path,
            "header": self.header,
            "hunks": [hunk.to_dict() for hunk in self.hunks],
        }

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        """Check if the document contains no hunks."""
        return not self.hunks

    def get_hunk(self, index: int) -> Hunk | None:
        """Look up a hunk by its parse index.

        Args:
            index: Hunk index from a previous parse of the same diff

        Returns:
            The hunk, or None if the index is out of range
        """
        if 0 <= index < len(self.hunks):
            return self.hunks[index]
        return None

    def build_patch(self, hunks: list[Hunk] | tuple[Hunk, ...] | None = None) -> str:
        """Build a patch from this document's header and a subset of its hunks.

        Args:
            hunks: Hunks to include, in order (default: all hunks)

        Returns:
            Patch text suitable for git apply
        """
        return build_patch(self.header, self.hunks if hunks is None else hunks)


# ============================================================
# Patch Building
# ============================================================


def build_patch(header: str, hunks: list[Hunk] | tuple[Hunk, ...]) -> str:
    """Build a patch from a diff header and an ordered list of hunks.

    Hunk content is used verbatim; nothing is renumbered, so a subset of
    hunks yields exactly the same hunk text as the full document.

    Args:
        header: The document header (diff --git, index, ---, +++ lines)
        hunks: Hunks to include, in the order given

    Returns:
        Header and hunk contents joined by newlines, plus a trailing newline
    """
    parts = [header]
    parts.extend(hunk.content for hunk in hunks)
    return "\n".join(parts) + "\n"
