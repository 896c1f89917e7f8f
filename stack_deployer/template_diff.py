"""
Line-oriented diff between the deployed template and the candidate template.
"""

import difflib
import json
from dataclasses import dataclass
from typing import Any, List

HEADER = "header"
ADD = "add"
REMOVE = "remove"
TEXT = "text"


@dataclass(frozen=True)
class DiffLine:
    text: str
    kind: str


def classify(line: str) -> str:
    """Display class of a unified diff line, from its leading character"""
    if line.startswith("@"):
        return HEADER
    if line.startswith("+"):
        return ADD
    if line.startswith("-"):
        return REMOVE
    return TEXT


def normalize_template_body(body: Any) -> str:
    """
    Return a template body as text.
    boto3 hands back JSON templates from get_template already decoded.
    """
    if isinstance(body, str):
        return body
    if isinstance(body, bytes):
        return body.decode("utf-8")
    return json.dumps(body, indent=2)


def _split_lines(text: str) -> List[str]:
    # Every line ends with a newline, so a missing final newline is no change
    return [line + "\n" for line in text.splitlines()]


def diff_lines(deployed: str, candidate: str) -> List[DiffLine]:
    """Unified diff with zero context lines; blank lines are dropped."""
    before = _split_lines(deployed)
    after = _split_lines(candidate.replace("\r", ""))

    result = []
    for index, line in enumerate(difflib.unified_diff(before, after, n=0)):
        # The first two lines are the ---/+++ file headers
        if index < 2 and line.startswith(("---", "+++")):
            continue

        line = line.rstrip()
        if not line:
            continue

        result.append(DiffLine(line, classify(line)))

    return result
