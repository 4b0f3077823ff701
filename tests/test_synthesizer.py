from __future__ import annotations

import pytest

from conftest import DOE, SMITH, make_export
from literature_notes.clients.exceptions import UnsafePathError
from literature_notes.domain.exceptions import UnknownCitekeyError
from literature_notes.domain.library import load_library
from literature_notes.domain.note_formatter import NoteFormatter
from literature_notes.domain.template_engine import compile_note_templates
from literature_notes.orchestration.synthesizer import NoteSynthesizer


def _synthesizer(
    records: list,
    title: str = "{{authorString}} ({{year}})",
    path: str = "Literature/{{noteTitle}}.md",
    content: str = "# {{title}}",
    replacement: str = "_",
) -> NoteSynthesizer:
    return NoteSynthesizer(
        load_library(make_export(records)),
        compile_note_templates(title, path, content),
        replacement,
    )


def test_title_and_path_for_single_author_entry() -> None:
    synthesizer = _synthesizer([SMITH])

    assert synthesizer.title_for("smith2019") == "Smith, J. (2019)"
    assert synthesizer.path_for("smith2019") == "Literature/Smith, J. (2019).md"


def test_scenario_with_authors_key_and_plain_year() -> None:
    synthesizer = _synthesizer(
        [{"id": "smith2019", "authors": [{"given": "Jane", "family": "Smith"}], "year": 2019}]
    )

    assert synthesizer.title_for("smith2019") == "Smith, J. (2019)"
    assert synthesizer.path_for("smith2019") == "Literature/Smith, J. (2019).md"


def test_citekey_templates() -> None:
    synthesizer = _synthesizer([DOE], title="{{citekey}}", content="{{citekey}}")

    assert synthesizer.title_for("doe2020") == "doe2020"
    assert synthesizer.content_for("doe2020") == "doe2020"


def test_content_template_sees_entry_fields() -> None:
    synthesizer = _synthesizer(
        [SMITH],
        content="{{title}} | {{containerTitle}} | {{DOI}} | {{entry.type}} | {{zoteroSelectURI}}",
    )

    assert synthesizer.content_for("smith2019") == (
        "Reading Notes at Scale | Journal of Note Taking | 10.1000/notes.2019 | "
        "article-journal | zotero://select/items/@smith2019"
    )


def test_unknown_citekey_raises() -> None:
    synthesizer = _synthesizer([SMITH])

    for operation in (
        synthesizer.title_for,
        synthesizer.path_for,
        synthesizer.content_for,
        synthesizer.synthesize,
    ):
        with pytest.raises(UnknownCitekeyError) as exc_info:
            operation("nonexistent")
        assert exc_info.value.citekey == "nonexistent"


def test_path_template_only_sees_note_title() -> None:
    synthesizer = _synthesizer([SMITH], path="{{citekey}}{{year}}/{{noteTitle}}.md")
    assert synthesizer.path_for("smith2019") == "/Smith, J. (2019).md"


def test_title_with_separators_stays_one_path_segment() -> None:
    synthesizer = _synthesizer(
        [{"id": "k", "title": "What/Why: A Study?"}], title="{{title}}", path="Notes/{{noteTitle}}.md"
    )

    assert synthesizer.title_for("k") == "What/Why: A Study?"
    assert synthesizer.note_title_for("k") == "What_Why_ A Study_"
    assert synthesizer.path_for("k") == "Notes/What_Why_ A Study_.md"


def test_empty_titles_fall_back_to_the_citekey() -> None:
    synthesizer = _synthesizer(
        [{"id": "a"}, {"id": "b", "title": "..."}], title="{{title}}"
    )

    assert synthesizer.path_for("a") == "Literature/a.md"
    assert synthesizer.path_for("b") == "Literature/b.md"
    assert synthesizer.synthesize("b").path == "Literature/b.md"
    assert synthesizer.note_title_for("a") == "a"


def test_unusable_title_and_citekey_raise() -> None:
    synthesizer = _synthesizer(
        [{"id": "???"}], title="{{title}}", replacement=""
    )

    with pytest.raises(UnsafePathError):
        synthesizer.path_for("???")


def test_custom_title_replacement() -> None:
    synthesizer = _synthesizer(
        [{"id": "k", "title": "A/B"}], title="{{title}}", replacement="-"
    )
    assert synthesizer.note_title_for("k") == "A-B"


def test_synthesize_returns_all_parts() -> None:
    note = _synthesizer([SMITH, DOE]).synthesize("doe2020")

    assert note.citekey == "doe2020"
    assert note.title == "Doe, J.; Roe, M. A. (2020)"
    assert note.path == "Literature/Doe, J.; Roe, M. A. (2020).md"
    assert note.content == "# A Study of Citations"


def test_synthesis_is_deterministic() -> None:
    synthesizer = _synthesizer([SMITH, DOE])
    first = [synthesizer.synthesize(key) for key in ("smith2019", "doe2020")]
    second = [synthesizer.synthesize(key) for key in ("smith2019", "doe2020")]

    assert first == second


@pytest.mark.parametrize(
    "title, expected",
    [
        ("plain", "plain"),
        ("  padded  ", "padded"),
        ("ends with dots...", "ends with dots"),
        ('a\\b/c:d*e?f"g<h>i|j', "a_b_c_d_e_f_g_h_i_j"),
        ("tab\there", "tab_here"),
    ],
)
def test_sanitize_title(title: str, expected: str) -> None:
    assert NoteFormatter.sanitize_title(title) == expected


def test_format_link() -> None:
    assert NoteFormatter.format_link("Smith, J. (2019)") == "[[Smith, J. (2019)]]"
