"""
Property-based tests for failure classification.

Classification depends only on the failure condition and the diagnostic
text, and the first matching rule wins.
"""

import string

from hypothesis import given, strategies as st

from ytdlp_service.domain.errors import ERROR_MESSAGES, ExtractionErrorKind
from ytdlp_service.infrastructure.error_classifier import (
    DIAGNOSTIC_RULES,
    FailureCondition,
    classify_failure,
    classify_kind,
)

from tests.property.strategies import diagnostic_text

# No rule needle can be spelled from this alphabet.
inert_text = st.text(alphabet=string.digits + " .:-_/", max_size=40)


@given(condition=st.sampled_from(list(FailureCondition)), text=diagnostic_text)
def test_classification_is_deterministic(condition, text):
    assert classify_kind(condition, text) is classify_kind(condition, text)


@given(text=diagnostic_text)
def test_timeout_and_missing_binary_ignore_text(text):
    assert classify_kind(FailureCondition.TIMEOUT, text) is ExtractionErrorKind.TIMEOUT_ERROR
    assert classify_kind(FailureCondition.NOT_FOUND, text) is ExtractionErrorKind.YTDLP_NOT_FOUND


@given(text=inert_text, condition=st.sampled_from([FailureCondition.EXIT_STATUS, FailureCondition.OUTPUT_LIMIT]))
def test_unmatched_text_is_generic_tool_error(text, condition):
    assert classify_kind(condition, text) is ExtractionErrorKind.YTDLP_ERROR


@given(
    data=st.data(),
    prefix=inert_text,
    suffix=inert_text,
    upper=st.booleans(),
)
def test_earliest_rule_wins(data, prefix, suffix, upper):
    first = data.draw(st.integers(min_value=0, max_value=len(DIAGNOSTIC_RULES) - 1))
    later = data.draw(st.integers(min_value=first, max_value=len(DIAGNOSTIC_RULES) - 1))
    first_needle = data.draw(st.sampled_from(DIAGNOSTIC_RULES[first][0]))
    later_needle = data.draw(st.sampled_from(DIAGNOSTIC_RULES[later][0]))

    needles = [later_needle, first_needle] if data.draw(st.booleans()) else [first_needle, later_needle]
    text = prefix + " ".join(needles) + suffix
    if upper:
        text = text.upper()

    assert classify_kind(FailureCondition.EXIT_STATUS, text) is DIAGNOSTIC_RULES[first][1]


@given(text=diagnostic_text)
def test_classified_error_uses_fixed_message(text):
    error = classify_failure(FailureCondition.EXIT_STATUS, text)

    assert error.message == ERROR_MESSAGES[error.kind]
    assert "diagnostic" not in error.to_dict()
