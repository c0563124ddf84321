import pytest

from anonboard.anonymity import (
    HIDDEN_KEYWORD_LABEL,
    anonymize_text,
    bucket_count,
    looks_like_nickname,
    mask_keyword,
    mask_token,
    should_hide_evidence,
    should_hide_keyword,
)


@pytest.mark.parametrize("count,m,expected", [
    (0, 6, True), (5, 6, True), (6, 6, False), (40, 6, False), (2, 1, False),
])
def test_should_hide_is_strict_less_than(count, m, expected):
    assert should_hide_evidence(count, m) is expected
    assert should_hide_keyword(count, m) is expected


@pytest.mark.parametrize("count,m,expected", [
    (0, 6, "0"),
    (1, 6, "1~2"),
    (2, 6, "1~2"),
    (3, 6, "3~5"),
    (5, 6, "3~5"),
    (6, 6, "6"),
    (137, 6, "137"),
    (7, 10, "1~9"),
    (-4, 6, "0"),
    (1, 0, "1"),
])
def test_bucket_count(count, m, expected):
    assert bucket_count(count, m) == expected


def test_bucket_count_defaults_to_min_sample():
    assert bucket_count(4) == "3~5"
    assert bucket_count(6) == "6"


@pytest.mark.parametrize("keyword,expected", [
    ("", HIDDEN_KEYWORD_LABEL),
    ("징", HIDDEN_KEYWORD_LABEL),
    ("징벌", HIDDEN_KEYWORD_LABEL),
    ("차사잡", "차**"),
    ("드리프트", "드**"),
    ("테일즈런너", "테**너"),
    ("  runner  ", "r**r"),
])
def test_mask_keyword(keyword, expected):
    assert mask_keyword(keyword) == expected


@pytest.mark.parametrize("keyword", ["abc", "a**", "a**b", "징벌연습", "x**yz", "hello world"])
def test_mask_never_returns_input_for_longer_keywords(keyword):
    assert mask_keyword(keyword) != keyword


def test_nickname_heuristics():
    assert looks_like_nickname("달리는곰")
    assert looks_like_nickname("runner77")
    assert looks_like_nickname("speedy")
    assert looks_like_nickname("곰_탱이")
    assert not looks_like_nickname("ab")
    assert not looks_like_nickname("징벌고수")  # contains game vocabulary
    assert not looks_like_nickname("a" * 17)
    assert not looks_like_nickname("123456")


def test_mask_token_lengths():
    assert mask_token("abcd") == "***"
    assert mask_token("abcdefgh") == "a***"
    assert mask_token("abcdefghi") == "ab***"


def test_anonymize_text_keeps_punctuation_and_spacing():
    out = anonymize_text("어제 (runner77)  진짜 잘함!")
    assert out == "어제 (r***)  진짜 잘함!"


def test_anonymize_text_leaves_plain_words():
    assert anonymize_text("징벌 주행") == "징벌 주행"
    assert anonymize_text("") == ""
