"""Vote tallying, podium ranking and theme rollover for the daily contest."""
from .announce import build_rules_message, format_announcement
from .eligibility import is_disqualified, is_qualifying_submission
from .models import (
    SENTINEL,
    Announcement,
    Attachment,
    CommunitySettings,
    EmbedMedia,
    PodiumEntry,
    Reaction,
    Reactor,
    RoundOutcome,
    RoundStatus,
    StagedTheme,
    Submission,
)
from .pipeline import run_round
from .podium import compute_podium, select_latest_round
from .rollover import rollover
from .tally import count_qualifying_votes

__all__ = [
    "SENTINEL",
    "Announcement",
    "Attachment",
    "CommunitySettings",
    "EmbedMedia",
    "PodiumEntry",
    "Reaction",
    "Reactor",
    "RoundOutcome",
    "RoundStatus",
    "StagedTheme",
    "Submission",
    "build_rules_message",
    "compute_podium",
    "count_qualifying_votes",
    "format_announcement",
    "is_disqualified",
    "is_qualifying_submission",
    "rollover",
    "run_round",
    "select_latest_round",
]
