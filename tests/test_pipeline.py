"""Tests for running a full contest round against a fake platform."""
import asyncio
from datetime import datetime, timezone

from conftest import FakePlatform, FakeThemeStore, drawing, voters
from drawbot.contest.models import CommunitySettings, RoundStatus
from drawbot.contest.pipeline import rules_for, run_round
from drawbot.infra.config import ContestConfig

NOW = datetime(2026, 10, 18, 4, 0, tzinfo=timezone.utc)


def fans(n):
    return voters(*(f"fan{i}" for i in range(n)))


def settings(**overrides):
    return CommunitySettings(guild_id="1", name="Art Club", **overrides)


def run(platform, guild_settings=None, themes=None, config=None):
    return asyncio.run(
        run_round(
            platform,
            guild_settings or settings(),
            themes or FakeThemeStore(),
            config=config or ContestConfig(round_timeout_seconds=5),
            now=NOW,
        )
    )


def test_round_is_announced():
    platform = FakePlatform([drawing("a", fire=fans(3)), drawing("b", fire=fans(1))])
    outcome = run(platform)
    assert outcome.status is RoundStatus.ANNOUNCED
    assert [e.id for e in outcome.podium] == ["a", "b", "none"]
    text, mentions = platform.announced[0]
    assert "Congratulations <@a>!" in text
    assert mentions == frozenset()


def test_ping_users_lets_winner_be_mentioned():
    platform = FakePlatform([drawing("123", fire=fans(2))])
    run(platform, settings(ping_users=True))
    assert platform.announced[0][1] == frozenset({"123"})


def test_disabled_guild_does_nothing():
    platform = FakePlatform([drawing("a", fire=fans(3))])
    outcome = run(platform, settings(bot_enabled=False))
    assert outcome.status is RoundStatus.DISABLED
    assert platform.announced == []


def test_missing_forum():
    assert run(FakePlatform(forum_missing=True)).status is RoundStatus.NO_FORUM


def test_no_round():
    platform = FakePlatform(has_round=False)
    assert run(platform).status is RoundStatus.NO_ROUND
    assert platform.announced == []


def test_no_results_skips_announcement_and_rollover():
    themes = FakeThemeStore()
    platform = FakePlatform([drawing("a", content="just chatting", fire=fans(4))])
    outcome = run(platform, themes=themes)
    assert outcome.status is RoundStatus.NO_RESULTS
    assert platform.announced == []
    assert platform.created == []
    assert themes.updates == []


def test_missing_chat_channel():
    platform = FakePlatform([drawing("a", fire=fans(1))], chat_missing=True)
    outcome = run(platform)
    assert outcome.status is RoundStatus.NO_CHANNEL
    assert outcome.podium[0].id == "a"


def test_winner_theme_rolls_over_into_new_round():
    themes = FakeThemeStore()
    themes.stage("a", "1", "Lighthouses", "Stormy if possible")
    platform = FakePlatform([drawing("a", fire=fans(3))], create_result="777")

    outcome = run(platform, settings(ping_users=True), themes)

    assert outcome.new_round_ref == "777"
    title, body = platform.created[0]
    assert title == "Lighthouses"
    assert body.startswith("Theme by: <@a>\n\nStormy if possible\n\nWelcome to the daily drawing thread")
    text, mentions = platform.announced[0]
    assert "The new theme for today is here: <#777>" in text
    assert mentions == frozenset()
    assert not asyncio.run(themes.get("a", "1")).is_staged


def test_theme_saving_disabled_skips_rollover():
    themes = FakeThemeStore()
    themes.stage("a", "1", "Lighthouses")
    platform = FakePlatform([drawing("a", fire=fans(3))])

    outcome = run(platform, settings(theme_saving_enabled=False), themes)

    assert outcome.new_round_ref is None
    assert platform.created == []
    assert asyncio.run(themes.get("a", "1")).is_staged


def test_slow_tally_times_out_without_side_effects():
    class SlowPlatform(FakePlatform):
        async def fetch_submissions(self, round_ref):
            await asyncio.sleep(10)
            return [], False

    themes = FakeThemeStore()
    platform = SlowPlatform()
    outcome = run(platform, themes=themes, config=ContestConfig(round_timeout_seconds=0.05))
    assert outcome.status is RoundStatus.TIMED_OUT
    assert platform.announced == []
    assert themes.updates == []


def test_unexpected_error_reports_failure(caplog):
    class BrokenPlatform(FakePlatform):
        async def announce(self, text, mention_ids):
            raise RuntimeError("discord is down")

    outcome = run(BrokenPlatform([drawing("a", fire=fans(1))]))
    assert outcome.status is RoundStatus.FAILED
    assert "Error running daily round for guild 1" in caplog.text


def test_seed_post_flag_is_passed_through():
    seed = drawing("host", fire=fans(9))
    platform = FakePlatform([drawing("a", fire=fans(1)), seed], last_is_op=True)
    outcome = run(platform)
    assert outcome.podium[0].id == "a"


def test_moderator_timer_uses_platform_lookup():
    from conftest import TIMER
    from drawbot.contest.models import Reaction

    marked = drawing("a", fire=fans(5), reactions=[Reaction(emoji=TIMER, users=voters("mod"))])
    platform = FakePlatform([marked, drawing("b", fire=fans(1))], moderators={"mod"})
    assert run(platform).podium[0].id == "b"


def test_rules_for_includes_next_deadline():
    text = rules_for(ContestConfig(cron_schedule="0 4 * * *"), NOW)
    assert "- The deadline is: 04:00 UTC" in text


def test_rules_for_skips_deadline_for_invalid_cron():
    text = rules_for(ContestConfig(cron_schedule="whenever"), NOW)
    assert "deadline" not in text
