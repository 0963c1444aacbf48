"""
Tests for Teams card composition.
"""

from src.config.users import UserConfig
from src.events.models import CommentEvent, MergeEvent, ProviderType, ReviewEvent, ReviewState
from src.events.recipients import RecipientMatch, RecipientRole
from src.notifications.cards import (
    MAX_BODY_LENGTH,
    build_comment_card,
    build_mention_card,
    build_merge_card,
    build_review_card,
    compose,
    truncate_body,
)


def content(card):
    return card["attachments"][0]["content"]


def title(card):
    return content(card)["body"][0]["text"]


def color(card):
    return content(card)["body"][0]["color"]


def facts(card):
    return {fact["title"]: fact["value"] for fact in content(card)["body"][1]["facts"]}


def actions(card):
    return [(action["title"], action["url"]) for action in content(card)["actions"]]


def comment_event(source=ProviderType.GITHUB, file_path=None, body="Please rename this"):
    return CommentEvent(
        source=source,
        pr_author_identity="alice",
        pr_title="Add login",
        pr_url="https://example.test/pr/1",
        repo_name="example/repo",
        comment_author_identity="dave",
        comment_body=body,
        comment_url="https://example.test/pr/1#c1",
        file_path=file_path,
    )


class TestTruncation:
    def test_short_body_unchanged(self):
        assert truncate_body("x" * MAX_BODY_LENGTH) == "x" * MAX_BODY_LENGTH

    def test_long_body_truncated_with_ellipsis(self):
        assert truncate_body("y" * 501) == "y" * 500 + "..."

    def test_comment_card_truncates_body(self):
        card = build_comment_card(comment_event(body="z" * 800))

        assert content(card)["body"][-1]["text"] == "z" * 500 + "..."


class TestCommentCards:
    """Owner and mention variants."""

    def test_general_comment_card(self):
        card = build_comment_card(comment_event())

        assert card["type"] == "message"
        assert card["attachments"][0]["contentType"] == "application/vnd.microsoft.card.adaptive"
        assert content(card)["version"] == "1.4"
        assert "dave commented on your PR" in title(card)
        assert facts(card) == {
            "Source:": "GitHub",
            "Repository:": "example/repo",
            "PR:": "Add login",
            "Comment by:": "dave",
        }
        assert actions(card) == [
            ("View Comment", "https://example.test/pr/1#c1"),
            ("View PR", "https://example.test/pr/1"),
        ]

    def test_review_line_comment_card(self):
        card = build_comment_card(comment_event(file_path="src/app.py"))

        assert "Code Review Comment from dave" in title(card)
        assert facts(card)["File:"] == "src/app.py"

    def test_gitlab_uses_mr_label(self):
        card = build_comment_card(comment_event(source=ProviderType.GITLAB))

        assert "commented on your MR" in title(card)
        assert facts(card)["MR:"] == "Add login"
        assert facts(card)["Source:"] == "GitLab"
        assert ("View MR", "https://example.test/pr/1") in actions(card)

    def test_mention_card(self):
        card = build_mention_card(comment_event(), "frontend-team")

        assert "dave mentioned you (@frontend-team)" in title(card)
        assert color(card) == "Attention"
        assert facts(card)["Mentioned by:"] == "dave"
        assert content(card)["body"][-1]["text"] == "Please rename this"
        assert len(actions(card)) == 2


class TestMergeAndReviewCards:
    def test_merge_card(self):
        event = MergeEvent(source=ProviderType.GITLAB, pr_title="Fix", pr_url="https://mr", repo_name="g/p",
                           merged_by_identity="lead")

        card = build_merge_card(event)

        assert "lead merged your MR" in title(card)
        assert color(card) == "Good"
        assert facts(card)["Merged by:"] == "lead"
        assert actions(card) == [("View MR", "https://mr")]
        assert len(content(card)["body"]) == 2

    def test_approved_review_card(self):
        event = ReviewEvent(source=ProviderType.GITHUB, review_state=ReviewState.APPROVED,
                            reviewed_by_identity="rev", pr_url="https://pr")

        card = build_review_card(event)

        assert "rev approved your PR" in title(card)
        assert color(card) == "Good"
        assert facts(card)["Reviewed by:"] == "rev"
        assert len(content(card)["body"]) == 2

    def test_changes_requested_card_includes_truncated_body(self):
        event = ReviewEvent(source=ProviderType.GITHUB, review_state=ReviewState.CHANGES_REQUESTED,
                            reviewed_by_identity="rev", review_body="b" * 600)

        card = build_review_card(event)

        assert "rev requested changes on your PR" in title(card)
        assert color(card) == "Warning"
        assert content(card)["body"][-1]["text"] == "b" * 500 + "..."


class TestCompose:
    """Variant selection by event kind and role."""

    user = UserConfig(name="alice", teams_webhook_url="https://teams.test/alice")

    def test_owner_comment(self):
        card = compose(comment_event(), RecipientMatch(self.user, RecipientRole.OWNER))

        assert "commented on your PR" in title(card)

    def test_mention(self):
        card = compose(comment_event(), RecipientMatch(self.user, RecipientRole.MENTIONED, "qa"))

        assert "mentioned you (@qa)" in title(card)

    def test_merge(self):
        event = MergeEvent(source=ProviderType.GITHUB, merged_by_identity="bob")

        assert "merged your PR" in title(compose(event, RecipientMatch(self.user, RecipientRole.OWNER)))

    def test_review(self):
        event = ReviewEvent(source=ProviderType.GITLAB, review_state=ReviewState.APPROVED,
                            reviewed_by_identity="bob")

        assert "approved your MR" in title(compose(event, RecipientMatch(self.user, RecipientRole.OWNER)))
