"""Helpers for tests."""

import re


def check_good_markdown(text: str) -> None:
    """
    Make some checks of Markdown text.

    These are meant to catch mistakes in templates or code producing Markdown.

    Returns:
        Nothing.  Will raise an exception with a failure message if something
        is wrong.
    """
    if text.startswith((" ", "\n", "\t")):
        raise ValueError(f"Markdown shouldn't start with whitespace: {text!r}")

    # Unfilled template variables render as empty strings.
    if re.search(r"\*\*@\*\*|\*\*\*\*\*\*", text):
        raise ValueError(f"Markdown has an empty emphasis: {text!r}")

    if "None" in text:
        raise ValueError(f"Markdown mentions None: {text!r}")
