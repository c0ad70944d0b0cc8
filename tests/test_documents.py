import pytest

from diffdeck.documents import Document, DocumentSet, language_for_title
from diffdeck.errors import DocumentLimitError, UnknownDocumentError


def make_set(*texts: str) -> DocumentSet:
    return DocumentSet.from_texts(*(texts or ("base", "variant")))


def test_document_updates_return_new_values_and_keep_id() -> None:
    doc = Document(text="one", title="a.ts")

    edited = doc.with_text("two")

    assert edited is not doc
    assert edited.id == doc.id
    assert edited.text == "two"
    assert doc.with_text("one") is doc
    assert doc.with_title("a.ts") is doc


def test_document_lines_treat_empty_text_as_one_line() -> None:
    assert Document(text="").lines() == [""]
    assert Document(text="a\nb\n").lines() == ["a", "b", ""]
    assert Document(text="a\nb").line_count == 2


def test_set_requires_between_two_and_four_documents() -> None:
    with pytest.raises(DocumentLimitError):
        DocumentSet.from_texts("only one")
    with pytest.raises(DocumentLimitError):
        DocumentSet.from_texts("1", "2", "3", "4", "5")


def test_append_grows_to_max_then_raises() -> None:
    documents = make_set()

    documents = documents.append().append()

    assert len(documents) == 4
    assert documents[2].title == "Comparison 2"
    assert documents[3].text == ""
    assert not documents.can_append
    with pytest.raises(DocumentLimitError):
        documents.append()


def test_remove_last_truncates_tail_and_keeps_base() -> None:
    documents = make_set("base", "one", "two")
    base = documents.base

    shrunk = documents.remove_last()

    assert shrunk.base is base
    assert [doc.text for doc in shrunk] == ["base", "one"]
    with pytest.raises(DocumentLimitError):
        shrunk.remove_last()


def test_replace_text_preserves_untouched_identity() -> None:
    documents = make_set("base", "one", "two")
    target = documents[1]

    updated = documents.replace_text(target.id, "ONE")

    assert updated is not documents
    assert updated[0] is documents[0]
    assert updated[2] is documents[2]
    assert updated[1].text == "ONE"
    assert updated.replace_text(target.id, "ONE") is updated


def test_unknown_document_id_raises() -> None:
    documents = make_set()

    with pytest.raises(UnknownDocumentError):
        documents.replace_title("missing", "x")
    with pytest.raises(KeyError):
        documents.get("missing")
    assert documents.find("missing") is None


def test_replace_documents_rejects_id_changes() -> None:
    documents = make_set()
    stranger = Document(text="x")

    with pytest.raises(ValueError):
        documents.replace_documents({documents[1].id: stranger})


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("App.tsx", "tsx"),
        ("types.TS", "typescript"),
        ("button.jsx", "jsx"),
        ("main.mjs", "javascript"),
        ("site.css", "css"),
        ("icon.svg", "markup"),
        ("data.json", "json"),
        ("Refactored TypeScript", "javascript"),
    ],
)
def test_language_for_title(title: str, expected: str) -> None:
    assert language_for_title(title) == expected


def test_language_for_title_custom_default() -> None:
    assert language_for_title("notes.txt", default="plain") == "plain"
