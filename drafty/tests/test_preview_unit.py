import pytest

from drafty import make_preview
from drafty.document.models import Entity
from drafty.preview.generator import PREVIEW_FIELDS, preview, strip_entity_data
from drafty.render.plain_text import render
from drafty.validation.errors import DraftyValidationError
from drafty.validation.validator import validate

PREVIEW_CASES = [
    (
        {
            "ent": [{"data": {"mime": "image/jpeg", "name": "hello.jpg", "val": "<38992, bytes: ...>"}, "tp": "EX"}],
            "fmt": [{"at": -1, "key": 0}],
        },
        {
            "fmt": [{"at": -1, "key": 0}],
            "ent": [{"tp": "EX", "data": {"mime": "image/jpeg", "name": "hello.jpg"}}],
        },
    ),
    (
        {
            "ent": [{"data": {"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"}, "tp": "LN"}],
            "fmt": [{"len": 22}],
            "txt": "https://api.tinode.co/",
        },
        {
            "txt": "https://api.tin",
            "fmt": [{"len": 15, "key": 0}],
            "ent": [{"tp": "LN", "data": {"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"}}],
        },
    ),
    (
        {
            "ent": [
                {
                    "data": {
                        "height": 213,
                        "mime": "image/jpeg",
                        "name": "roses.jpg",
                        "val": "<38992, bytes: ...>",
                        "width": 638,
                    },
                    "tp": "IM",
                }
            ],
            "fmt": [{"len": 1}],
            "txt": " ",
        },
        {
            "txt": " ",
            "fmt": [{"len": 1, "key": 0}],
            "ent": [
                {
                    "tp": "IM",
                    "data": {"width": 638, "height": 213, "mime": "image/jpeg", "name": "roses.jpg"},
                }
            ],
        },
    ),
    (
        {
            "txt": "This text is formatted and deleted too",
            "fmt": [
                {"at": 5, "len": 4, "tp": "ST"},
                {"at": 13, "len": 9, "tp": "EM"},
                {"at": 35, "len": 3, "tp": "ST"},
                {"at": 27, "len": 11, "tp": "DL"},
            ],
        },
        {
            "txt": "This text is fo",
            "fmt": [{"at": 5, "len": 4, "tp": "ST"}, {"at": 13, "len": 2, "tp": "EM"}],
        },
    ),
    (
        {
            "txt": "мультибайтовый юникод",
            "fmt": [{"len": 14, "tp": "ST"}, {"at": 15, "len": 6, "tp": "EM"}],
        },
        {
            "txt": "мультибайтовый ",
            "fmt": [{"tp": "ST", "len": 14}],
        },
    ),
]


@pytest.mark.parametrize(("payload", "expected"), PREVIEW_CASES)
def test_make_preview_truncates_reference_documents(payload, expected) -> None:
    assert make_preview(payload, 15) == expected


@pytest.mark.parametrize(
    "payload",
    [
        {"txt": "This should fail", "fmt": [{"at": 50, "len": -45, "tp": "ST"}]},
        {"ent": [{"xy": True, "tp": "XY"}], "fmt": [{"len": 1, "key": -2}], "txt": " "},
        {"txt": True},
    ],
)
def test_make_preview_rejects_invalid_documents(payload) -> None:
    with pytest.raises(DraftyValidationError):
        make_preview(payload, 15)


def _multi_entity_document():
    return validate(
        {
            "txt": "ab cd efgh ij",
            "fmt": [
                {"at": 0, "len": 2, "key": 2},
                {"at": 11, "len": 2, "key": 0},
                {"at": 3, "len": 1, "key": 1},
                {"at": 4, "len": 3, "tp": "ST"},
                {"at": -1, "key": 0},
                {"at": 3, "len": 2, "key": 2},
            ],
            "ent": [
                {"tp": "EX", "data": {"name": "zero.pdf", "val": "AAAA", "mime": "application/pdf"}},
                {"tp": "MN", "data": {"val": "usr1", "extra": "x"}},
                {"tp": "LN", "data": {"url": "https://two.test", "title": "drop me"}},
            ],
        }
    )


def test_preview_renumbers_entities_in_first_reference_order() -> None:
    result = preview(_multi_entity_document(), 5)

    assert result.text == "ab cd"
    assert [span.key for span in result.spans] == [0, 1, None, 2, 0]
    assert [entity.type for entity in result.entities] == ["LN", "MN", "EX"]
    assert result.entities[0].data == {"url": "https://two.test"}
    assert result.entities[1].data == {"val": "usr1"}
    assert result.entities[2].data == {"name": "zero.pdf", "mime": "application/pdf"}


def test_preview_clips_spans_crossing_the_cut() -> None:
    result = preview(_multi_entity_document(), 5)

    styled = [span for span in result.spans if span.style == "ST"]
    assert styled[0].start == 4
    assert styled[0].length == 1
    assert all(span.is_attachment or span.end <= len(result.text) for span in result.spans)


def test_preview_keys_are_dense_and_render_without_dangling_references() -> None:
    doc = _multi_entity_document()
    for max_length in range(0, len(doc.text) + 2):
        result = preview(doc, max_length)
        keys = {span.key for span in result.spans if span.key is not None}

        assert len(result.text) <= max_length
        assert keys == set(range(len(result.entities)))
        assert isinstance(render(result), str)


def test_preview_zero_length_keeps_only_document_attachments() -> None:
    result = preview(_multi_entity_document(), 0)

    assert result.text == ""
    assert all(span.is_attachment for span in result.spans)
    assert [entity.type for entity in result.entities] == ["EX"]


def test_preview_does_not_mutate_source_document() -> None:
    doc = _multi_entity_document()
    preview(doc, 3)

    assert doc.entities[0].data["val"] == "AAAA"
    assert len(doc.spans) == 6


def test_preview_rejects_negative_length() -> None:
    with pytest.raises(ValueError):
        preview(validate({"txt": "abc"}), -1)


def test_strip_entity_data_drops_unknown_types_and_empty_data() -> None:
    assert strip_entity_data(Entity(type="XY", data={"val": "big"})).data is None
    assert strip_entity_data(Entity(type="LN", data={"title": "no url"})).data is None
    assert strip_entity_data(Entity(type="BN", data={"name": "ok", "act": "pub", "blob": 1})).data == {
        "name": "ok",
        "act": "pub",
    }


def test_preview_fields_never_keep_raw_payload() -> None:
    assert all("val" not in fields for tp, fields in PREVIEW_FIELDS.items() if tp in {"IM", "EX"})


def test_preview_keeps_trailing_zero_length_span_when_text_fits() -> None:
    payload = {"txt": "ab", "fmt": [{"at": 2}], "ent": [{"tp": "MN", "data": {"val": "usr1"}}]}

    assert make_preview(payload, 2) == {
        "txt": "ab",
        "fmt": [{"at": 2, "key": 0}],
        "ent": [{"tp": "MN", "data": {"val": "usr1"}}],
    }
    assert make_preview(payload, 5) == make_preview(payload, 2)
    assert make_preview({"txt": "abc", "fmt": [{"at": 2}], "ent": payload["ent"]}, 2) == {"txt": "ab"}
