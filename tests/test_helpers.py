"""Tests of the helpers in tests/helpers.py"""

import pytest

from .helpers import check_good_markdown


@pytest.mark.parametrize("text, ok, msg", [
    ("This is a paragraph", True, ""),
    ("This is a paragraph\n\nThis is also\n", True, ""),
    ("/retest", True, ""),
    ("   Bad: initial space", False, "start with whitespace"),
    ("\nBad: initial newline", False, "start with whitespace"),
    ("**@** Thank you", False, "empty emphasis"),
    ("remove these labels ******.", False, "empty emphasis"),
    ("Please use **/None cancel**", False, "mentions None"),
])
def test_check_good_markdown(text, ok, msg):
    if ok:
        assert msg == ""
        check_good_markdown(text)
    else:
        with pytest.raises(ValueError, match=msg):
            check_good_markdown(text)
