"""
Tests for the column registry: slugs, unique keys and status resolution.
"""
import pytest

from app.models.column import BoardColumn
from app.services.board.status import (
    compact,
    ensure_unique_key,
    normalize,
    resolve_column,
    resolve_status_key,
    slugify,
)


def _columns():
    return [
        BoardColumn(key="todo", label="To Do", position=0),
        BoardColumn(key="in-progress", label="In Progress", position=1),
        BoardColumn(key="done", label="Done", position=2),
    ]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Slugs & keys
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_slugify_collapses_punctuation():
    assert slugify("Needs Review!!") == "needs-review"
    assert slugify("  --Hello,   World--  ") == "hello-world"


def test_slugify_falls_back_to_column():
    assert slugify("!!!") == "column"
    assert slugify("") == "column"


def test_slugify_truncates_to_forty_characters():
    slug = slugify("a" * 60)
    assert slug == "a" * 40
    # A hyphen left at the cut is trimmed
    assert not slugify("x" * 39 + " yz").endswith("-")


def test_ensure_unique_key_appends_counter():
    assert ensure_unique_key("needs-review", []) == "needs-review"
    assert ensure_unique_key("needs-review", ["needs-review"]) == "needs-review-2"
    assert ensure_unique_key("needs-review", ["needs-review", "needs-review-2"]) == "needs-review-3"


def test_normalize_and_compact():
    assert normalize("In  Progress!") == "in-progress"
    assert compact("In Progress") == "inprogress"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Resolution
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@pytest.mark.parametrize("desired", ["in-progress", "In Progress", "in progress", "IN-PROGRESS", "inprogress"])
def test_resolution_is_case_and_separator_insensitive(desired):
    assert resolve_status_key(_columns(), desired) == "in-progress"


def test_unknown_status_is_not_found():
    assert resolve_status_key(_columns(), "archive") is None


def test_empty_status_defaults_to_first_column():
    assert resolve_status_key(_columns(), None) == "todo"
    assert resolve_status_key(_columns(), "") == "todo"
    assert resolve_status_key(_columns(), "   ") == "todo"


def test_no_columns_resolves_nothing():
    assert resolve_status_key([], "todo") is None
    assert resolve_status_key([], None) is None


def test_exact_key_beats_label_of_another_column():
    """A key match wins even if some other column's label also matches."""
    columns = [
        BoardColumn(key="later", label="done", position=0),
        BoardColumn(key="done", label="Finished", position=1),
    ]
    assert resolve_status_key(columns, "done") == "done"


def test_label_match_returns_column_object():
    column = resolve_column(_columns(), "to do")
    assert column.key == "todo"
    assert column.label == "To Do"
