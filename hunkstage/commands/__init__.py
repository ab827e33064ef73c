"""CLI command implementations."""

from hunkstage.commands.diff import cmd_diff
from hunkstage.commands.file import cmd_file
from hunkstage.commands.hunk import cmd_hunk
from hunkstage.commands.status import cmd_status
from hunkstage.commands.watch import cmd_watch

__all__ = ["cmd_diff", "cmd_file", "cmd_hunk", "cmd_status", "cmd_watch"]
