"""Output formatting for the command line front end.

Converts view models and parsed diffs to JSON or human-readable text.
"""

from __future__ import annotations

import json

from hunkstage.domain.diff import DiffDocument, Hunk
from hunkstage.domain.view import SelectedFile, ViewData, ViewMessage


# ============================================================
# JSON Output
# ============================================================


def format_message_as_json(message: ViewMessage) -> str:
    """Format a view message as a single-line JSON object."""
    return json.dumps(message.to_dict())


def format_document_as_json(document: DiffDocument | None, file_path: str) -> str:
    """Format a parsed diff as JSON.

    Args:
        document: Parsed document, or None for an empty diff
        file_path: Path used when the document is None

    Returns:
        Indented JSON string
    """
    if document is None:
        return json.dumps({"file_path": file_path, "header": "", "hunks": []}, indent=2)
    return json.dumps(document.to_dict(), indent=2)


# ============================================================
# Text Output
# ============================================================


def format_hunk_as_text(hunk: Hunk) -> str:
    """Format one hunk with a title line and its content.

    A pure deletion has no lines in the new file, so its title shows the
    removed range of the old file instead.
    """
    if hunk.new_count == 0:
        old_end = hunk.old_start + hunk.old_count - 1
        title = f"Hunk {hunk.index}: deletes old lines {hunk.old_start}-{old_end}"
    else:
        title = f"Hunk {hunk.index}: lines {hunk.new_start}-{hunk.new_end}"
    body = hunk.content.rstrip("\n")
    return f"{title}\n{body}"


def format_document_as_text(document: DiffDocument | None, file_path: str) -> str:
    """Format a parsed diff as human-readable text.

    Args:
        document: Parsed document, or None for an empty diff
        file_path: Path used when the document is None

    Returns:
        Text listing each hunk with its index and new-file line range
    """
    if document is None or document.is_empty:
        return f"No changes in {file_path}"

    lines = [f"File: {document.file_path}", f"Total hunks: {len(document.hunks)}", ""]
    for hunk in document.hunks:
        lines.append(format_hunk_as_text(hunk))
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def format_selected_file_as_text(selected: SelectedFile) -> str:
    side = "staged" if selected.staged else "unstaged"
    lines = [f"{selected.path} ({side})"]
    if not selected.hunks:
        lines.append("  No changes")
    for hunk in selected.hunks:
        lines.append(format_hunk_as_text(hunk))
    return "\n".join(lines)


def format_view_as_text(data: ViewData) -> str:
    """Format the staging view as text: staged files, unstaged files, selection."""
    lines = [f"Staged files ({len(data.staged_files)}):"]
    lines.extend(f"  {entry.status}  {entry.path}" for entry in data.staged_files)
    lines.append(f"Unstaged files ({len(data.unstaged_files)}):")
    lines.extend(f"  {entry.status}  {entry.path}" for entry in data.unstaged_files)

    if data.selected_file is not None:
        lines.append("")
        lines.append(format_selected_file_as_text(data.selected_file))

    return "\n".join(lines)


def format_message(message: ViewMessage, output_format: str = "text") -> str:
    """Format a view message in the requested format."""
    if output_format == "json":
        return format_message_as_json(message)
    if message.is_error:
        return f"Error: {message.message}"
    return format_view_as_text(message.data)
