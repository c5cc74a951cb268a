"""
The comments the bot makes on pull requests.
"""

from typing import Iterable

from flask import render_template

# Commenting this makes the CI run the tests again.
RETEST_COMMENT = "/retest"


def not_set_reviewer_comment(author: str) -> str:
    """Ask the author of a new pull request to pick a reviewer."""
    return render_template("not_set_reviewer.md.j2", author=author)


def labels_cleared_comment(labels: Iterable[str]) -> str:
    """Explain why review labels were taken off after a push."""
    return render_template("labels_cleared.md.j2", labels=list(labels))


def merge_label_conflict_comment(command: str, other_command: str, other_label: str) -> str:
    """
    Refuse a merge-strategy command because the other strategy is in place.

    Arguments:
        command: the refused command, without the slash: "rebase".
        other_command: the command that set the other label: "flattened".
        other_label: the label in the way: "flattened/merge".
    """
    return render_template(
        "merge_label_conflict.md.j2",
        command=command,
        other_command=other_command,
        other_label=other_label,
    )
