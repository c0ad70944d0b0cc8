import pytest

from diffdeck.documents import Document
from diffdeck.errors import InvalidPatternError
from diffdeck.search import (
    FindOptions,
    Match,
    SegmentKind,
    compile_pattern,
    compute_matches,
    group_by_document,
    highlight_segments,
    line_of_offset,
    line_segments,
    next_index,
    prev_index,
)


def make_docs(*texts: str) -> list[Document]:
    return [Document(text=text, id=f"doc{index + 1}") for index, text in enumerate(texts)]


def test_case_insensitive_matches_across_documents_in_order() -> None:
    docs = make_docs("Hello world", "say hello")

    matches = compute_matches(docs, "hello", FindOptions(case_sensitive=False))

    assert matches == [Match("doc1", 0, 5), Match("doc2", 4, 9)]


def test_case_sensitive_skips_other_case() -> None:
    docs = make_docs("Hello world", "say hello")

    matches = compute_matches(docs, "hello", FindOptions(case_sensitive=True))

    assert matches == [Match("doc2", 4, 9)]


def test_empty_query_returns_nothing() -> None:
    assert compute_matches(make_docs("abc", "abc"), "", FindOptions()) == []
    assert compute_matches(make_docs("abc", "abc"), "", FindOptions(use_regex=True)) == []


def test_literal_mode_escapes_metacharacters() -> None:
    docs = make_docs("a.b axb (x)", "f(x) + g(x)")

    assert compute_matches(docs, "a.b", FindOptions()) == [Match("doc1", 0, 3)]
    assert compute_matches(docs, "(x)", FindOptions()) == [
        Match("doc1", 8, 11),
        Match("doc2", 1, 4),
        Match("doc2", 8, 11),
    ]


def test_regex_mode_uses_pattern_as_written() -> None:
    docs = make_docs("a.b axb", "")

    matches = compute_matches(docs, "a.b", FindOptions(use_regex=True))

    assert matches == [Match("doc1", 0, 3), Match("doc1", 4, 7)]


def test_matches_do_not_overlap() -> None:
    docs = make_docs("aaaa", "aaa")

    matches = compute_matches(docs, "aa", FindOptions())

    assert matches == [Match("doc1", 0, 2), Match("doc1", 2, 4), Match("doc2", 0, 2)]


def test_invalid_regex_yields_empty_list() -> None:
    docs = make_docs("(open", "x")

    assert compute_matches(docs, "(", FindOptions(use_regex=True)) == []


def test_compile_pattern_reports_invalid_regex() -> None:
    with pytest.raises(InvalidPatternError) as excinfo:
        compile_pattern("(", FindOptions(use_regex=True))

    assert excinfo.value.query == "("
    assert isinstance(excinfo.value, ValueError)


def test_zero_width_regex_matches_are_representable() -> None:
    matches = compute_matches(make_docs("ab", ""), "x*", FindOptions(use_regex=True))

    assert Match("doc1", 0, 0) in matches
    assert all(match.length == 0 for match in matches)


def test_match_rejects_inverted_range() -> None:
    with pytest.raises(ValueError):
        Match("doc1", 5, 2)


def test_navigation_wraps_in_both_directions() -> None:
    assert next_index(2, 3) == 0
    assert prev_index(0, 3) == 2
    assert next_index(None, 0) is None
    assert prev_index(1, 0) is None
    assert next_index(None, 4) == 0
    assert prev_index(None, 4) == 3


@pytest.mark.parametrize("count", [1, 2, 5])
def test_next_and_prev_are_inverses(count: int) -> None:
    for index in range(count):
        assert prev_index(next_index(index, count), count) == index
        assert next_index(prev_index(index, count), count) == index


def test_group_by_document_includes_empty_buckets() -> None:
    docs = make_docs("x", "y", "x")
    matches = compute_matches(docs, "x", FindOptions())

    grouped = group_by_document(docs, matches)

    assert grouped == {
        "doc1": [Match("doc1", 0, 1)],
        "doc2": [],
        "doc3": [Match("doc3", 0, 1)],
    }


def test_highlight_segments_mark_active_match() -> None:
    text = "one two one"
    matches = [Match("doc1", 0, 3), Match("doc1", 8, 11)]

    segments = highlight_segments(text, matches, active=matches[1])

    assert [(s.kind, s.text) for s in segments] == [
        (SegmentKind.MATCH, "one"),
        (SegmentKind.PLAIN, " two "),
        (SegmentKind.ACTIVE, "one"),
    ]
    assert "".join(s.text for s in segments) == text


def test_line_of_offset_is_one_based() -> None:
    text = "a\nbb\nccc"

    assert line_of_offset(text, 0) == 1
    assert line_of_offset(text, 2) == 2
    assert line_of_offset(text, 5) == 3


def test_find_options_toggle() -> None:
    options = FindOptions()

    assert options.toggled("use_regex") == FindOptions(use_regex=True)
    with pytest.raises(ValueError):
        options.toggled("whole_word")


def test_oversized_repeat_count_is_an_invalid_pattern() -> None:
    query = "a{99999999999999999999}"

    with pytest.raises(InvalidPatternError):
        compile_pattern(query, FindOptions(use_regex=True))
    assert compute_matches(make_docs("aaa", "a"), query, FindOptions(use_regex=True)) == []


def test_deeply_nested_regex_yields_empty_list() -> None:
    query = "(" * 1200 + "a" + ")" * 1200

    assert compute_matches(make_docs("bbb", "b"), query, FindOptions(use_regex=True)) == []


def test_line_segments_clip_matches_to_the_line() -> None:
    spanning = Match("doc1", 1, 4)
    active = Match("doc1", 6, 7)

    first = line_segments("ab", 0, [spanning, active], active)
    second = line_segments("cd", 3, [spanning, active], active)
    third = line_segments("ef", 6, [spanning, active], active)

    assert [(s.kind, s.text, s.start) for s in first] == [
        (SegmentKind.PLAIN, "a", 0),
        (SegmentKind.MATCH, "b", 1),
    ]
    assert [(s.kind, s.text) for s in second] == [
        (SegmentKind.MATCH, "c"),
        (SegmentKind.PLAIN, "d"),
    ]
    assert [(s.kind, s.text) for s in third] == [
        (SegmentKind.ACTIVE, "e"),
        (SegmentKind.PLAIN, "f"),
    ]
