"""Tests for cron parsing and next-run summaries."""
from datetime import datetime, timezone

import pytest
import pytz
from apscheduler.triggers.cron import CronTrigger

from drawbot.schedule import (
    ScheduleSummary,
    build_trigger,
    is_valid_cron,
    next_run,
    summarize,
)


@pytest.mark.parametrize("expr", ["0 4 * * *", "*/15 * * * *", "30 23 * * 1-5"])
def test_valid_expressions(expr):
    assert is_valid_cron(expr)


@pytest.mark.parametrize("expr", ["", "0 4 * *", "0 4 * * * *", "61 4 * * *", "daily"])
def test_invalid_expressions(expr):
    assert not is_valid_cron(expr)


def test_build_trigger_is_utc():
    trigger = build_trigger("0 4 * * *")
    assert isinstance(trigger, CronTrigger)
    assert str(trigger.timezone) == str(pytz.UTC)


def test_build_trigger_rejects_invalid():
    with pytest.raises(ValueError):
        build_trigger("not a cron")


def test_next_run_is_strictly_after_reference():
    ref = datetime(2026, 10, 18, 4, 0, tzinfo=timezone.utc)
    assert next_run("0 4 * * *", ref) == datetime(2026, 10, 19, 4, 0, tzinfo=timezone.utc)


def test_next_run_treats_naive_as_utc():
    ref = datetime(2026, 10, 18, 3, 0)
    assert next_run("0 4 * * *", ref) == datetime(2026, 10, 18, 4, 0, tzinfo=timezone.utc)


def test_summarize_reports_time_remaining():
    now = datetime(2026, 10, 18, 1, 30, tzinfo=timezone.utc)
    summary = summarize("0 4 * * *", now)
    assert isinstance(summary, ScheduleSummary)
    assert (summary.hours, summary.minutes) == (2, 30)
    assert summary.utc_str == "2026-10-18 04:00 UTC"
    assert summary.discord_local == f"<t:{int(summary.next_utc.timestamp())}>"


def test_summarize_invalid_expression():
    assert summarize("bogus") == "Configured cron expression 'bogus' is invalid."
