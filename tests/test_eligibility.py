"""Tests for image detection and overtime markers."""
import asyncio

import pytest

from conftest import FIRE, TIMER, drawing, voters
from drawbot.contest.eligibility import (
    IMAGE_EXTENSIONS,
    is_disqualified,
    is_qualifying_submission,
    is_timer_reaction,
)
from drawbot.contest.models import Attachment, EmbedMedia, Reaction, Submission


def _bare(**kwargs) -> Submission:
    return Submission(author_id="a", author_display_name="A", **kwargs)


@pytest.mark.parametrize(
    "attachment",
    [
        Attachment(content_type="image/png"),
        Attachment(content_type="IMAGE/JPEG"),
        Attachment(filename="sketch.JPG"),
        Attachment(filename="scan.tiff"),
        Attachment(url="https://cdn.example.com/x/ink.webp"),
    ],
)
def test_image_attachments_qualify(attachment):
    assert is_qualifying_submission(_bare(attachments=[attachment]))


def test_non_image_attachment_does_not_qualify():
    att = Attachment(content_type="application/pdf", filename="notes.pdf")
    assert not is_qualifying_submission(_bare(attachments=[att]))


def test_embed_with_image_or_thumbnail_qualifies():
    assert is_qualifying_submission(_bare(embeds=[EmbedMedia(image_url="https://x/y")]))
    assert is_qualifying_submission(_bare(embeds=[EmbedMedia(thumbnail_url="https://x/y")]))
    assert is_qualifying_submission(_bare(embeds=[EmbedMedia(type="image", url="https://x/y")]))


def test_link_embed_without_media_does_not_qualify():
    assert not is_qualifying_submission(_bare(embeds=[EmbedMedia(type="link", url="https://x")]))


@pytest.mark.parametrize(
    "content",
    [
        "https://example.com/art.png",
        "look at this http://example.com/a/b.jpeg?width=300 !",
        "HTTPS://EXAMPLE.COM/DRAW.GIF",
    ],
)
def test_image_url_in_content_qualifies(content):
    assert is_qualifying_submission(_bare(content=content))


@pytest.mark.parametrize(
    "content",
    ["", "nice work everyone", "https://example.com/page.html", "art.png without a link"],
)
def test_plain_text_does_not_qualify(content):
    assert not is_qualifying_submission(_bare(content=content))


def test_broken_submission_counts_as_not_an_image():
    sub = _bare(attachments=[object()])
    assert is_qualifying_submission(sub) is False


@pytest.mark.parametrize("emoji", ["⏱️", "⏱", "⏲️", "⏲", "timer", "Stopwatch", "timer_clock"])
def test_timer_reactions_are_recognised(emoji):
    assert is_timer_reaction(emoji)


@pytest.mark.parametrize("emoji", [FIRE, "fire", "", None, "clock"])
def test_other_reactions_are_not_timers(emoji):
    assert not is_timer_reaction(emoji)


def test_author_timer_reaction_disqualifies():
    sub = drawing("author", reactions=[Reaction(emoji=TIMER, users=voters("author"))])
    assert asyncio.run(is_disqualified(sub)) is True


def test_timer_from_other_member_is_ignored():
    sub = drawing("author", reactions=[Reaction(emoji=TIMER, users=voters("someone"))])

    async def never_mod(user_id):
        return False

    assert asyncio.run(is_disqualified(sub, never_mod)) is False


def test_moderator_timer_reaction_disqualifies():
    sub = drawing("author", reactions=[Reaction(emoji=TIMER, users=voters("fan", "mod"))])

    async def is_mod(user_id):
        return user_id == "mod"

    assert asyncio.run(is_disqualified(sub, is_mod)) is True


def test_unresolvable_timer_reaction_is_skipped():
    async def broken():
        raise RuntimeError("rate limited")

    sub = drawing(
        "author",
        reactions=[
            Reaction(emoji=TIMER, fetch_users=broken),
            Reaction(emoji="⏱️", users=voters("author")),
        ],
    )
    assert asyncio.run(is_disqualified(sub)) is True


def test_failed_moderator_lookup_is_not_a_moderator():
    sub = drawing("author", reactions=[Reaction(emoji=TIMER, users=voters("x"))])

    async def exploding(user_id):
        raise RuntimeError("member lookup failed")

    assert asyncio.run(is_disqualified(sub, exploding)) is False


def test_fire_reactions_do_not_disqualify():
    sub = drawing("author", fire=voters("author"))
    assert asyncio.run(is_disqualified(sub)) is False


@pytest.mark.parametrize("ext", IMAGE_EXTENSIONS)
def test_every_listed_extension_qualifies(ext):
    assert is_qualifying_submission(_bare(attachments=[Attachment(filename=f"art.{ext}")]))
    assert is_qualifying_submission(_bare(content=f"https://example.com/art.{ext.upper()}?v=2"))
