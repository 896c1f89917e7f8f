"""
Unit tests for the template diff.
"""

from collections import OrderedDict

from stack_deployer.template_diff import (
    ADD,
    HEADER,
    REMOVE,
    TEXT,
    classify,
    diff_lines,
    normalize_template_body,
)

DEPLOYED = """Resources:
  Bucket:
    Type: AWS::S3::Bucket
    Properties:
      BucketName: old-name
"""


def test_identical_templates_produce_no_lines():
    """Test that identical templates have no diff."""
    assert diff_lines(DEPLOYED, DEPLOYED) == []


def test_one_changed_line():
    """Test that one changed line gives one removal and one addition."""
    candidate = DEPLOYED.replace("old-name", "new-name")

    lines = diff_lines(DEPLOYED, candidate)

    assert [line.kind for line in lines] == [HEADER, REMOVE, ADD]
    assert lines[1].text == "-      BucketName: old-name"
    assert lines[2].text == "+      BucketName: new-name"
    assert [line for line in lines if line.kind == REMOVE] == [lines[1]]
    assert [line for line in lines if line.kind == ADD] == [lines[2]]


def test_file_headers_are_not_reported():
    """Test that the ---/+++ headers are dropped."""
    lines = diff_lines("a\n", "b\n")
    assert not any(line.text.startswith(("---", "+++")) for line in lines)


def test_carriage_returns_in_candidate_are_ignored():
    """Test that CRLF line endings are not a change."""
    candidate = DEPLOYED.replace("\n", "\r\n")
    assert diff_lines(DEPLOYED, candidate) == []


def test_missing_final_newline_is_not_a_change():
    """Only a final newline differs, so there is nothing to report."""
    assert diff_lines("a\nb", "a\nb\n") == []
    assert diff_lines("a\nb\n", "a\nb") == []


def test_added_line_only():
    """Test a hunk that only adds a line."""
    lines = diff_lines("a\nb\n", "a\nb\nc\n")
    assert [(line.kind, line.text) for line in lines] == [
        (HEADER, "@@ -2,0 +3 @@"),
        (ADD, "+c"),
    ]


def test_classify():
    """Test line classification by leading character."""
    assert classify("@@ -1 +1 @@") == HEADER
    assert classify("+added") == ADD
    assert classify("-removed") == REMOVE
    assert classify(" context") == TEXT


def test_normalize_template_body():
    """Test conversion of each template body type to text."""
    assert normalize_template_body("text") == "text"
    assert normalize_template_body(b"bytes") == "bytes"

    body = OrderedDict([("Resources", {})])
    assert normalize_template_body(body) == '{\n  "Resources": {}\n}'
