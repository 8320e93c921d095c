from __future__ import annotations

import pytest

from graphform.domain.errors import LabelMatcherError, ValidationError
from graphform.domain.labels import (
    format_label_matchers,
    parse_label_matcher,
    validate_label_matchers,
)


def test_validate_label_matchers_keeps_order() -> None:
    matchers = ["team=payments", "env=prod", "team=a,team=b"]

    assert validate_label_matchers(matchers) == ("team=payments", "env=prod", "team=a,team=b")


def test_validate_label_matchers_accepts_absent_and_empty() -> None:
    assert validate_label_matchers(None) == ()
    assert validate_label_matchers([]) == ()


def test_parse_label_matcher_splits_comma_groups() -> None:
    assert parse_label_matcher("team=a,env=prod") == (("team", "a"), ("env", "prod"))


@pytest.mark.parametrize(
    ("matcher", "message"),
    [
        ("teampayments", "expected key=value"),
        ("team=pay=ments", "expected a single '=' per label"),
        ("=payments", "key must not be empty"),
        ("team=", "value must not be empty"),
        ("team=a,", "expected key=value"),
    ],
)
def test_parse_label_matcher_rejects_malformed_tokens(matcher: str, message: str) -> None:
    with pytest.raises(LabelMatcherError) as excinfo:
        parse_label_matcher(matcher)

    assert excinfo.value.matcher == matcher
    assert message in str(excinfo.value)
    assert repr(matcher) in str(excinfo.value)


def test_validate_label_matchers_names_first_bad_entry() -> None:
    with pytest.raises(ValidationError, match="'broken'"):
        validate_label_matchers(["team=payments", "broken", "also=bad=token"])


def test_format_label_matchers() -> None:
    assert format_label_matchers(("team=a", "env=prod")) == "team=a env=prod"
    assert format_label_matchers(()) == "<none>"
