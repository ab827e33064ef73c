"""Terminal prompts and separators for the command line front end."""

from __future__ import annotations

YES_ANSWERS = ("y", "yes")
NO_ANSWERS = ("n", "no")


def confirm(message: str, default: bool = False) -> bool:
    """Ask a yes/no question on stdin.

    An empty answer picks the default and end of input counts as no.
    Any other answer is asked again.

    Args:
        message: Question to display
        default: Answer used when the user just presses enter

    Returns:
        True if the user answered yes
    """
    hint = "[Y/n]" if default else "[y/N]"
    while True:
        try:
            answer = input(f"{message} {hint}: ").strip().lower()
        except EOFError:
            return False

        if not answer:
            return default
        if answer in YES_ANSWERS:
            return True
        if answer in NO_ANSWERS:
            return False
        print("  Please answer 'y' or 'n'")


def print_separator(title: str = "", char: str = "─", width: int = 60) -> None:
    """Print a horizontal rule, with an optional title near its left end."""
    if not title:
        print(char * width)
        return
    prefix = f"{char * 3} {title} "
    print(prefix + char * max(0, width - len(prefix)))
