from __future__ import annotations

import dataclasses

import pytest

from literature_notes.domain.models import Author, format_author_string, normalize


def test_missing_optional_fields_normalize_to_empty() -> None:
    entry = normalize({"id": "bare"})

    assert entry.id == "bare"
    assert entry.authors == ()
    assert entry.author_string == ""
    assert entry.year is None
    assert entry.title is None


def test_single_author_string() -> None:
    entry = normalize({"id": "smith2019", "author": [{"given": "Jane", "family": "Smith"}]})
    assert entry.author_string == "Smith, J."


def test_authors_key_is_accepted() -> None:
    entry = normalize({"id": "smith2019", "authors": [{"given": "Jane", "family": "Smith"}]})
    assert entry.authors == (Author(family="Smith", given="Jane"),)


def test_multiple_authors_are_joined_in_order() -> None:
    entry = normalize(
        {
            "id": "k",
            "author": [
                {"given": "Jane", "family": "Smith"},
                {"given": "John Paul", "family": "Doe"},
            ],
        }
    )
    assert entry.author_string == "Smith, J.; Doe, J. P."


@pytest.mark.parametrize(
    "name, expected",
    [
        ({"given": "Jean-Paul", "family": "Sartre"}, "Sartre, J.-P."),
        ({"literal": "World Health Organization"}, "World Health Organization"),
        ({"family": "Plato"}, "Plato"),
        (
            {"given": "Vincent", "family": "Gogh", "non-dropping-particle": "van"},
            "van Gogh, V.",
        ),
        ("Anonymous Collective", "Anonymous Collective"),
    ],
)
def test_author_name_forms(name, expected: str) -> None:
    assert normalize({"id": "k", "author": [name]}).author_string == expected


def test_invalid_author_values_are_skipped() -> None:
    entry = normalize({"id": "k", "author": [{}, 42, None, {"family": "Doe"}]})
    assert entry.authors == (Author(family="Doe"),)


def test_author_list_of_wrong_type_is_empty() -> None:
    assert normalize({"id": "k", "author": "Smith"}).authors == ()


def test_author_string_is_deterministic() -> None:
    authors = (Author(family="Smith", given="Jane"), Author(family="Doe", given="J."))
    assert format_author_string(authors) == format_author_string(tuple(authors))
    assert format_author_string(authors) == "Smith, J.; Doe, J."


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"year": 2019}, 2019),
        ({"year": "2020"}, 2020),
        ({"issued": {"date-parts": [[2018, 5, 1]]}}, 2018),
        ({"issued": {"date-parts": [["2017"]]}}, 2017),
        ({"issued": {"raw": "Spring 2016"}}, 2016),
        ({"issued": {"literal": "circa 1850"}}, 1850),
        ({"issued": {"date-parts": [[]]}}, None),
        ({"year": True}, None),
        ({"year": "forthcoming"}, None),
        ({"year": "2019²"}, None),
        ({"year": "--5"}, None),
        ({"year": "٢٠١٩"}, None),
        ({"year": " -44 "}, -44),
        ({"issued": {"date-parts": [["1999²"]]}}, None),
    ],
)
def test_year_sources(raw: dict, expected: int | None) -> None:
    assert normalize({"id": "k", **raw}).year == expected


def test_explicit_year_takes_precedence_over_issued() -> None:
    entry = normalize({"id": "k", "year": 2001, "issued": {"date-parts": [[1999]]}})
    assert entry.year == 2001


def test_numeric_citekey_becomes_string() -> None:
    assert normalize({"id": 123}).id == "123"


def test_bibliographic_fields_are_copied() -> None:
    entry = normalize(
        {
            "id": "k",
            "title": "T",
            "container-title": "Journal",
            "publisher": "Press",
            "DOI": "10.1/x",
            "URL": "https://example.com",
            "abstract": "Abstract.",
        }
    )
    assert entry.title == "T"
    assert entry.container_title == "Journal"
    assert entry.publisher == "Press"
    assert entry.doi == "10.1/x"
    assert entry.url == "https://example.com"
    assert entry.abstract == "Abstract."
    assert entry.zotero_select_uri == "zotero://select/items/@k"


def test_entry_is_immutable() -> None:
    entry = normalize({"id": "k", "year": 2000})

    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.year = 2001  # type: ignore[misc]
    with pytest.raises(TypeError):
        entry.data["id"] = "other"  # type: ignore[index]


def test_raw_data_is_a_copy() -> None:
    raw = {"id": "k", "note": "original"}
    entry = normalize(raw)
    raw["note"] = "changed"

    assert entry.data["note"] == "original"
