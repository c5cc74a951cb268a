"""
The labels the bot adds and removes.  The labels themselves live on Gitee,
the bot only asks for them to be added or removed.
"""

from typing import Iterable, List

# Signed-CLA label, removed on request by "/cla cancel".
CLA_LABEL = "openeuler-cla/yes"

# Merge-strategy labels.  Only one of them should be on a pull request.
REBASE_LABEL = "rebase/merge"
FLATTENED_LABEL = "flattened/merge"

MERGE_LABEL_SUFFIX = "/merge"
SIG_LABEL_PREFIX = "sig/"

APPROVED_LABEL = "approved"

# Reviewer approvals: "lgtm", "lgtm-somebody", "ci/lgtm-sig-kernel", ...
LGTM_LABEL_PREFIXES = ("lgtm", "ci/lgtm")


def lgtm_labels(labels: Iterable[str]) -> List[str]:
    """The LGTM-style labels among `labels`, sorted."""
    return sorted(lbl for lbl in labels if lbl.startswith(LGTM_LABEL_PREFIXES))
