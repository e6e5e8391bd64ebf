"""Tests for inline metadata extractors."""

from datetime import date

import pytest

from mdtasks.models import Task
from mdtasks.parsing import (
    extract_context,
    extract_dates,
    extract_metadata,
    extract_priority,
    extract_project,
    extract_recurrence,
    extract_tags,
    find_link_spans,
    mask_links,
)
from mdtasks.utils import to_epoch_ms


def new_task() -> Task:
    return Task(id="a.md-L0", file_path="a.md")


def ms(year: int, month: int, day: int) -> int:
    return to_epoch_ms(date(year, month, day))


class TestExtractDates:
    """Tests for date extraction."""

    @pytest.mark.parametrize(
        "text,field_name",
        [
            ("📅 2025-03-01", "due_date"),
            ("🗓️ 2025-03-01", "due_date"),
            ("⏳ 2025-03-01", "scheduled_date"),
            ("⌛ 2025-03-01", "scheduled_date"),
            ("🛫 2025-03-01", "start_date"),
            ("✅ 2025-03-01", "completed_date"),
            ("➕ 2025-03-01", "created_date"),
        ],
    )
    def test_emoji_dates(self, text: str, field_name: str):
        task = new_task()
        remaining = extract_dates(task, f"Task {text}", "tasks")

        assert getattr(task, field_name) == ms(2025, 3, 1)
        assert remaining.strip() == "Task"

    @pytest.mark.parametrize(
        "text,field_name",
        [
            ("[due:: 2025-03-01]", "due_date"),
            ("[scheduled:: 2025-03-01]", "scheduled_date"),
            ("[start:: 2025-03-01]", "start_date"),
            ("[completion:: 2025-03-01]", "completed_date"),
            ("[created:: 2025-03-01]", "created_date"),
            ("[Due:: 2025-03-01]", "due_date"),
        ],
    )
    def test_dataview_dates(self, text: str, field_name: str):
        task = new_task()
        remaining = extract_dates(task, f"Task {text}", "dataview")

        assert getattr(task, field_name) == ms(2025, 3, 1)
        assert remaining.strip() == "Task"

    def test_falls_back_to_other_format(self):
        """The non-preferred syntax is still recognised."""
        emoji_pref = new_task()
        extract_dates(emoji_pref, "Task [due:: 2025-03-01]", "tasks")
        dataview_pref = new_task()
        extract_dates(dataview_pref, "Task 📅 2025-03-01", "dataview")

        assert emoji_pref.due_date == ms(2025, 3, 1)
        assert dataview_pref.due_date == ms(2025, 3, 1)

    def test_preferred_format_wins(self):
        task = new_task()
        remaining = extract_dates(task, "Task 📅 2025-03-01 [due:: 2025-04-01]", "dataview")

        assert task.due_date == ms(2025, 4, 1)
        assert "📅 2025-03-01" in remaining

    def test_invalid_date_is_left_in_content(self):
        """An impossible date is not extracted and does not raise."""
        task = new_task()
        remaining = extract_dates(task, "Fix 📅 2025-02-30", "tasks")

        assert task.due_date is None
        assert remaining == "Fix 📅 2025-02-30"

    def test_existing_date_not_overwritten(self):
        task = new_task()
        task.due_date = ms(2024, 1, 1)
        remaining = extract_dates(task, "Task 📅 2025-03-01", "tasks")

        assert task.due_date == ms(2024, 1, 1)
        assert "📅 2025-03-01" in remaining


class TestExtractRecurrence:
    def test_emoji_recurrence_stops_at_next_marker(self):
        task = new_task()
        remaining = extract_recurrence(task, "Water 🔁 every week 📅 2025-03-01", "tasks")

        assert task.recurrence == "every week"
        assert "📅 2025-03-01" in remaining
        assert "🔁" not in remaining

    def test_emoji_recurrence_to_end(self):
        task = new_task()
        extract_recurrence(task, "Water 🔁 every day", "tasks")

        assert task.recurrence == "every day"

    @pytest.mark.parametrize("key", ["repeat", "recurrence"])
    def test_dataview_recurrence(self, key: str):
        task = new_task()
        remaining = extract_recurrence(task, f"Water [{key}:: every month]", "dataview")

        assert task.recurrence == "every month"
        assert remaining.strip() == "Water"


class TestExtractPriority:
    @pytest.mark.parametrize(
        "symbol,value",
        [("🔺", 5), ("⏫", 4), ("🔼", 3), ("🔽", 2), ("⏬", 1), ("[#A]", 4), ("[#B]", 3), ("[#C]", 2)],
    )
    def test_emoji_priority(self, symbol: str, value: int):
        task = new_task()
        remaining = extract_priority(task, f"Task {symbol}", "tasks")

        assert task.priority == value
        assert remaining.strip() == "Task"

    @pytest.mark.parametrize(
        "name,value",
        [("highest", 5), ("high", 4), ("medium", 3), ("low", 2), ("lowest", 1), ("High", 4), ("7", 7)],
    )
    def test_dataview_priority(self, name: str, value: int):
        task = new_task()
        extract_priority(task, f"Task [priority:: {name}]", "dataview")

        assert task.priority == value

    def test_unknown_priority_name_ignored(self):
        """An unrecognised priority leaves the field unset and the text intact."""
        task = new_task()
        remaining = extract_priority(task, "Task [priority:: urgent]", "tasks")

        assert task.priority is None
        assert "[priority:: urgent]" in remaining


class TestExtractProject:
    def test_dataview_project_removed(self):
        task = new_task()
        remaining = extract_project(task, "Task [project:: Home Reno]", "dataview")

        assert task.project == "Home Reno"
        assert remaining.strip() == "Task"

    def test_project_tag_left_for_tag_extraction(self):
        task = new_task()
        remaining = extract_project(task, "Plan #project/garden", "tasks")

        assert task.project == "garden"
        assert remaining == "Plan #project/garden"

    def test_project_tag_inside_link_ignored(self):
        task = new_task()
        extract_project(task, "See [[Board#project/garden]]", "tasks")

        assert task.project is None


class TestExtractContext:
    def test_emoji_context(self):
        task = new_task()
        remaining = extract_context(task, "Call @phone now", "tasks")

        assert task.context == "phone"
        assert remaining == "Call  now"

    def test_dataview_context(self):
        task = new_task()
        extract_context(task, "Call [context:: office]", "dataview")

        assert task.context == "office"

    def test_first_context_outside_links(self):
        """@tokens inside wiki links and markdown links are not contexts."""
        task = new_task()
        extract_context(task, "Email [[bob@example]] and [me](mailto:me@x.org) @home", "tasks")

        assert task.context == "home"


class TestExtractTags:
    def test_tags_removed_from_content(self):
        task = new_task()
        content = extract_tags(task, "Fix #bug in #ui/menu", "tasks")

        assert task.tags == ["#bug", "#ui/menu"]
        assert content == "Fix in"

    def test_tags_unique(self):
        task = new_task()
        extract_tags(task, "Fix #bug and #bug", "tasks")

        assert task.tags == ["#bug"]

    def test_tags_inside_links_excluded(self):
        """Link anchors are not tags and stay in the content."""
        task = new_task()
        content = extract_tags(
            task, "Read [[Notes#Section]] and [guide](http://x.com/#anchor) #real", "tasks"
        )

        assert task.tags == ["#real"]
        assert content == "Read [[Notes#Section]] and [guide](http://x.com/#anchor)"

    def test_hash_inside_word_is_not_tag(self):
        task = new_task()
        content = extract_tags(task, "Ticket abc#123", "tasks")

        assert task.tags == []
        assert content == "Ticket abc#123"

    def test_project_tag_excluded_in_tasks_format(self):
        task = new_task()
        task.project = "garden"
        content = extract_tags(task, "Plan #project/garden #outdoor", "tasks")

        assert task.tags == ["#outdoor"]
        assert content == "Plan"

    def test_project_tags_excluded_in_dataview_format(self):
        task = new_task()
        task.project = "Work"
        content = extract_tags(task, "Plan #project/other #outdoor", "dataview")

        assert task.tags == ["#outdoor"]
        assert content == "Plan"

    def test_project_derived_from_tag(self):
        task = new_task()
        extract_tags(task, "Plan #project/garden", "dataview")

        assert task.project == "garden"

    def test_dataview_fields_stripped(self):
        task = new_task()
        content = extract_tags(task, "Task [custom:: value] #a", "dataview")

        assert content == "Task"
        assert task.tags == ["#a"]

    def test_whitespace_collapsed(self):
        task = new_task()
        assert extract_tags(task, "  a   b  ", "tasks") == "a b"


class TestExtractMetadata:
    def test_everything_in_one_line(self):
        task = new_task()
        content = extract_metadata(
            task,
            "Water plants 🔁 every week ⏳ 2025-03-02 📅 2025-03-05 🔼 #project/garden #home @yard",
            "tasks",
        )

        assert content == "Water plants"
        assert task.recurrence == "every week"
        assert task.scheduled_date == ms(2025, 3, 2)
        assert task.due_date == ms(2025, 3, 5)
        assert task.priority == 3
        assert task.project == "garden"
        assert task.context == "yard"
        assert task.tags == ["#home"]

    def test_no_metadata(self):
        task = new_task()
        assert extract_metadata(task, "Nothing special here", "dataview") == "Nothing special here"


class TestLinks:
    def test_find_link_spans(self):
        text = "a [[wiki]] b [md](url)"
        assert find_link_spans(text) == [(2, 10), (13, 22)]

    def test_mask_preserves_length(self):
        text = "a [[wiki#x]] b"
        masked, spans = mask_links(text)

        assert len(masked) == len(text)
        assert "#" not in masked
        assert spans == [(2, 12)]
