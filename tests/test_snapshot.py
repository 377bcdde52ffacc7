"""Tests for snapshot assembly and persistence."""

import json
from datetime import datetime, timezone

import pytest

from okladiy.dedup import deduplicate
from okladiy.models import SourceFailure
from okladiy.snapshot import (
    apply_image_overrides,
    assemble_snapshot,
    load_image_overrides,
    sort_shows,
    write_snapshot,
)

NOW = datetime(2026, 3, 1, 6, 0, tzinfo=timezone.utc)


class TestSortShows:

    def test_date_ascending_undated_last(self, create_show):
        shows = [
            create_show(title="undated", date=None),
            create_show(title="late", date="2026-04-01"),
            create_show(title="early", date="2026-03-01"),
        ]
        assert [s.title for s in sort_shows(shows)] == ["early", "late", "undated"]

    def test_stable_for_ties(self, create_show):
        shows = [
            create_show(title="x1", date=None),
            create_show(title="a1", date="2026-03-01"),
            create_show(title="x2", date=None),
            create_show(title="a2", date="2026-03-01"),
        ]
        assert [s.title for s in sort_shows(shows)] == ["a1", "a2", "x1", "x2"]


class TestImageOverrides:

    def test_replaces_only_image(self, create_show):
        show = create_show(title="Band A", venue="Opolis", date="2026-03-14", image_url="old.jpg", price="$10")
        overrides = {"opolis|2026-03-14|band a": "https://img/new.jpg"}

        [result] = apply_image_overrides([show], overrides)

        assert result.image_url == "https://img/new.jpg"
        assert result.price == "$10"
        assert result.title == "Band A"

    def test_undated_key(self, create_show):
        show = create_show(title="Band B", venue="X", date=None)
        [result] = apply_image_overrides([show], {"x||band b": "b.jpg"})
        assert result.image_url == "b.jpg"

    def test_no_match_untouched(self, create_show):
        show = create_show(image_url="keep.jpg")
        assert apply_image_overrides([show], {"other|2026-01-01|x": "y.jpg"}) == [show]

    def test_load_normalizes_keys(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({
            " Opolis |2026-03-14| Band A ": "https://img/a.jpg",
            "not-a-key": "https://img/bad.jpg",
            "x|2026-01-01|y": "",
        }))

        assert load_image_overrides(path) == {"opolis|2026-03-14|band a": "https://img/a.jpg"}

    def test_load_missing_file(self, tmp_path):
        assert load_image_overrides(tmp_path / "nope.json") == {}

    def test_load_corrupt_file(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text("{not json")
        assert load_image_overrides(path) == {}


class TestAssembleSnapshot:

    def test_empty_input_is_valid(self):
        snapshot = assemble_snapshot([], now=NOW)

        assert snapshot.shows == ()
        assert snapshot.to_dict() == {
            "lastUpdated": "2026-03-01T06:00:00+00:00",
            "scraperErrors": [],
            "shows": [],
        }

    def test_three_record_example(self, create_show):
        shows = deduplicate([
            create_show(venue="X", date="2026-03-14", title="Band A"),
            create_show(venue="X", date="2026-03-14", title="Band A"),
            create_show(venue="X", date=None, title="Band B"),
        ])
        snapshot = assemble_snapshot(shows, now=NOW)

        assert [s.title for s in snapshot.shows] == ["Band A", "Band B"]
        assert snapshot.shows[-1].date is None

    def test_overrides_applied_before_sort(self, create_show):
        shows = [create_show(title="B", date=None), create_show(title="A", date="2026-03-14")]
        snapshot = assemble_snapshot(shows, overrides={"test venue||b": "b.jpg"}, now=NOW)

        assert [(s.title, s.image_url) for s in snapshot.shows] == [("A", None), ("B", "b.jpg")]

    def test_errors_carried(self, create_show):
        errors = [SourceFailure(source="vanguard", error="HTTP 503 fetching https://x")]
        snapshot = assemble_snapshot([create_show()], errors=errors, now=NOW)

        assert snapshot.to_dict()["scraperErrors"] == [
            {"source": "vanguard", "error": "HTTP 503 fetching https://x"},
        ]


class TestWriteSnapshot:

    def test_writes_json(self, tmp_path, create_show):
        path = tmp_path / "docs" / "shows.json"
        snapshot = assemble_snapshot([create_show(title="Band A", price="$10–$20")], now=NOW)

        write_snapshot(snapshot, path)

        text = path.read_text(encoding="utf-8")
        assert "$10–$20" in text  # non-ASCII kept as-is
        data = json.loads(text)
        assert data["lastUpdated"] == "2026-03-01T06:00:00+00:00"
        assert data["shows"][0]["title"] == "Band A"
        assert data["shows"][0]["venueUrl"] is None

    def test_write_failure_propagates(self, tmp_path, create_show):
        blocker = tmp_path / "docs"
        blocker.write_text("a file, not a directory")
        snapshot = assemble_snapshot([create_show()], now=NOW)

        with pytest.raises(OSError):
            write_snapshot(snapshot, blocker / "shows.json")
