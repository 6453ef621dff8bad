"""
Yes/no confirmation prompts for destructive or sweeping commands.
"""

import sys
from typing import TextIO


def confirm(
    reader: TextIO,
    writer: TextIO,
    msg: str,
    default: bool,
    confirm_all: bool,
) -> bool:
    """
    Ask the user to confirm a choice.

    Args:
        reader: Stream to read the answer from (e.g. stdin)
        writer: Stream to write the question to (e.g. stdout)
        msg: The question to display
        default: The answer used when the user just presses enter
        confirm_all: Skip the question and answer yes

    Returns:
        True if the user confirmed
    """
    if confirm_all:
        return True

    y_n = "(Y/n)" if default else "(y/N)"
    writer.write(f"{msg.strip()} {y_n} ")
    writer.flush()

    answer = reader.readline().strip().lower()
    if default:
        return answer != "n"
    return answer == "y"


def confirm_cli(msg: str, default: bool, confirm_all: bool) -> bool:
    """Convenience wrapper around `confirm` using stdin and stdout."""
    return confirm(sys.stdin, sys.stdout, msg, default, confirm_all)
