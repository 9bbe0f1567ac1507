"""Tests for the walkin command line."""

import itertools
import json
from datetime import timedelta

import pytest
from conftest import MONDAY_10AM

from walkin import cli
from walkin.clock import FixedClock


@pytest.fixture
def run_cli(monkeypatch, tmp_path, capsys):
    """Run the CLI on a temp store; each run sees the clock one minute later than the last."""
    monkeypatch.setenv("WALKIN_LOCATION_ID", "shop-1")
    monkeypatch.setenv("WALKIN_DATA_PATH", str(tmp_path / "waitlist.json"))
    monkeypatch.setenv("WALKIN_AUDIT_LOG", str(tmp_path / "audit.log"))
    monkeypatch.delenv("WALKIN_TIMEZONE", raising=False)
    monkeypatch.delenv("EMAIL_ENABLED", raising=False)
    minutes = itertools.count()
    monkeypatch.setattr(
        cli, "ShopClock", lambda tz: FixedClock(tz, MONDAY_10AM + timedelta(minutes=next(minutes)))
    )

    def _run(*argv: str) -> tuple[int, str]:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(list(argv))
        return exc_info.value.code, capsys.readouterr().out

    return _run


@pytest.fixture
def open_monday(run_cli):
    code, _ = run_cli("hours", "set", "--day", "1", "--start", "09:00", "--end", "17:00")
    assert code == 0
    return run_cli


class TestHoursCommands:
    """Tests for hours and closure subcommands."""

    def test_set_and_show(self, open_monday):
        code, out = open_monday("hours", "show")
        assert code == 0
        overview = json.loads(out)
        assert overview["hours"][0]["day_of_week"] == 1
        assert overview["hours"][0]["start_time"] == "09:00"

    def test_invalid_hours(self, run_cli):
        code, out = run_cli("hours", "set", "--day", "1", "--start", "17:00", "--end", "09:00")
        assert code == 1
        assert out.startswith("Error:")

    def test_load_file(self, run_cli, shop_file):
        code, out = run_cli("hours", "load", str(shop_file))
        assert code == 0
        assert "Loaded hours" in out

    def test_closure_and_reopen(self, open_monday):
        code, out = open_monday("closure", "--date", "2026-03-02", "--reason", "Holiday")
        assert code == 0
        assert "Closed on 2026-03-02" in out

        code, out = open_monday("status")
        assert "Closed today" in out

        code, out = open_monday("closure", "--date", "2026-03-02", "--reopen")
        assert "Reopened 2026-03-02" in out
        code, out = open_monday("status")
        assert "(open now)" in out


class TestQueueCommands:
    """Tests for the queue subcommands."""

    def test_join_and_status(self, open_monday):
        code, out = open_monday("join", "--customer", "alice", "--guests", "2")
        assert code == 0
        assert out.startswith("Joined ")
        assert "guests=2" in out

        open_monday("join", "--customer", "bob", "--email", "bob@example.com")
        code, out = open_monday("status", "--customer", "bob")
        assert "Position 2, 2 people ahead, about 60-80 minutes" in out

    def test_duplicate_join(self, open_monday):
        open_monday("join", "--customer", "alice")
        code, out = open_monday("join", "--customer", "alice")
        assert code == 1
        assert "Error:" in out

    def test_join_when_closed(self, run_cli):
        code, out = run_cli("join", "--customer", "alice")
        assert code == 1
        assert "The shop is closed" in out

    def test_serve_next_empty(self, open_monday):
        code, out = open_monday("serve-next")
        assert code == 1
        assert "Error:" in out

    def test_queue_listing_and_serve(self, open_monday):
        open_monday("join", "--customer", "alice", "--email", "alice@example.com")
        open_monday("join", "--customer", "bob")
        code, out = open_monday("queue")
        lines = out.strip().splitlines()
        assert "alice@example.com" in lines[0]
        assert "Unknown" in lines[1]

        code, out = open_monday("serve-next")
        assert "customer=alice" in out

    def test_leave(self, open_monday):
        open_monday("join", "--customer", "alice")
        code, out = open_monday("leave", "--customer", "alice")
        assert code == 0
        assert out.startswith("Left ")
        code, out = open_monday("status", "--customer", "alice")
        assert "not on the waitlist" in out

    def test_audit_written(self, open_monday, tmp_path):
        open_monday("join", "--customer", "alice")
        log = (tmp_path / "audit.log").read_text()
        assert "[HOURS]" in log
        assert "[JOIN]" in log


class TestAnnouncementCommands:
    def test_post_and_read(self, run_cli):
        code, out = run_cli("announce", "--title", "Closed Friday", "--message", "Training")
        assert code == 0

        code, out = run_cli("announcements", "--customer", "alice", "--mark-read")
        assert out.startswith("*")
        code, out = run_cli("announcements", "--customer", "alice")
        assert out.startswith(" ")


class TestConfiguration:
    def test_missing_location(self, run_cli, monkeypatch):
        monkeypatch.delenv("WALKIN_LOCATION_ID")
        code, out = run_cli("queue")
        assert code == 1
        assert "No shop location configured" in out

    def test_unknown_timezone(self, run_cli):
        code, out = run_cli("--timezone", "Mars/Olympus", "queue")
        assert code == 1
        assert "Unknown time zone" in out
