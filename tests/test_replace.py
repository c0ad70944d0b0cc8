import pytest

from diffdeck.documents import Document, DocumentSet
from diffdeck.errors import MatchOwnershipError, ReplacementTemplateError
from diffdeck.search import FindOptions, Match, compute_matches, replace_all, replace_one


def make_set(*texts: str) -> DocumentSet:
    return DocumentSet.of(
        Document(text=text, id=f"doc{index + 1}") for index, text in enumerate(texts)
    )


def test_replace_all_only_touches_changed_documents() -> None:
    documents = make_set("foo bar", "baz")

    updated = replace_all(documents, "bar", FindOptions(), "qux")

    assert [doc.text for doc in updated] == ["foo qux", "baz"]
    assert updated[1] is documents[1]
    assert updated[0].id == documents[0].id


def test_replace_all_without_changes_returns_same_set() -> None:
    documents = make_set("foo", "baz")

    assert replace_all(documents, "nothing", FindOptions(), "x") is documents
    assert replace_all(documents, "", FindOptions(), "x") is documents
    assert replace_all(documents, "(", FindOptions(use_regex=True), "x") is documents


def test_replace_all_respects_case_option() -> None:
    documents = make_set("Bar bar", "BAR")

    insensitive = replace_all(documents, "bar", FindOptions(), "x")
    sensitive = replace_all(documents, "bar", FindOptions(case_sensitive=True), "x")

    assert [doc.text for doc in insensitive] == ["x x", "x"]
    assert [doc.text for doc in sensitive] == ["Bar x", "BAR"]


def test_literal_replacement_is_inserted_verbatim() -> None:
    documents = make_set("a+b", "c")

    updated = replace_all(documents, "a+b", FindOptions(), r"\1 $&")

    assert updated[0].text == r"\1 $&"


def test_regex_replacement_expands_groups() -> None:
    documents = make_set("John Smith", "Jane Doe")

    updated = replace_all(
        documents, r"(\w+) (\w+)", FindOptions(use_regex=True), r"\2, \1"
    )

    assert [doc.text for doc in updated] == ["Smith, John", "Doe, Jane"]


def test_regex_replacement_with_bad_group_leaves_documents() -> None:
    documents = make_set("abc", "abd")

    assert replace_all(documents, "ab", FindOptions(use_regex=True), r"\9") is documents


def test_replace_one_splices_at_match() -> None:
    document = Document(text="say hello, hello", id="doc1")
    second = compute_matches([document], "hello", FindOptions())[1]

    updated = replace_one(document, second, "bye")

    assert updated.text == "say hello, bye"
    assert updated.id == document.id


def test_replace_one_handles_zero_width_match() -> None:
    document = Document(text="abc", id="doc1")

    updated = replace_one(document, Match("doc1", 1, 1), "-")

    assert updated.text == "a-bc"


def test_replace_one_rejects_foreign_match() -> None:
    document = Document(text="abc", id="doc1")

    with pytest.raises(MatchOwnershipError):
        replace_one(document, Match("doc2", 0, 1), "x")
    with pytest.raises(MatchOwnershipError):
        replace_one(document, Match("doc1", 2, 9), "x")


def test_replace_all_with_uncompilable_regex_returns_same_set() -> None:
    documents = make_set("aaa", "a")
    regex = FindOptions(use_regex=True)

    assert replace_all(documents, "a{99999999999999999999}", regex, "x") is documents
    nested = "(" * 1200 + "b" + ")" * 1200
    unrelated = make_set("ccc", "c")
    assert replace_all(unrelated, nested, regex, "x") is unrelated


def test_strict_replace_all_reports_bad_template() -> None:
    documents = make_set(r"C:\temp", "temp")

    with pytest.raises(ReplacementTemplateError) as excinfo:
        replace_all(documents, "temp", FindOptions(use_regex=True), r"\dir", strict=True)

    assert excinfo.value.replacement == r"\dir"
    assert replace_all(documents, "temp", FindOptions(use_regex=True), r"\dir") is documents
