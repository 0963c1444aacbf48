"""
Tests for owner/mention resolution, self-suppression and de-duplication.
"""

import pytest

from src.config.users import GitHubIdentity, GitLabIdentity, UserConfig
from src.events.models import CommentEvent, MergeEvent, ProviderType, ReviewEvent, ReviewState
from src.events.recipients import (
    RecipientRole,
    find_mention,
    find_mentions,
    resolve_owner,
    resolve_recipients,
    watch_names,
)


def github_comment(pr_author="alice", commenter="dave", body=""):
    return CommentEvent(
        source=ProviderType.GITHUB,
        pr_author_identity=pr_author,
        comment_author_identity=commenter,
        comment_body=body,
    )


def gitlab_comment(pr_author="999", commenter="dave", body=""):
    return CommentEvent(
        source=ProviderType.GITLAB,
        pr_author_identity=pr_author,
        comment_author_identity=commenter,
        comment_body=body,
    )


class TestOwnerResolution:
    """Matching the PR/MR author to a registered user."""

    def test_github_owner_is_case_insensitive(self, users, carol):
        assert resolve_owner(github_comment(pr_author="carol-dev"), users) == carol

    def test_gitlab_owner_matches_numeric_id(self, users, bob):
        assert resolve_owner(gitlab_comment(pr_author="999"), users) == bob

    def test_gitlab_owner_does_not_match_username(self, users):
        assert resolve_owner(gitlab_comment(pr_author="bob"), users) is None

    def test_empty_author_never_matches(self, users):
        assert resolve_owner(github_comment(pr_author=""), users) is None
        assert resolve_owner(gitlab_comment(pr_author=""), users) is None

    def test_user_without_platform_identity_never_owns(self, bob):
        # bob has no GitHub username
        assert resolve_owner(github_comment(pr_author="bob"), [bob]) is None

    def test_first_match_in_registry_order_wins(self):
        first = UserConfig(name="first", teams_webhook_url="u1", github=GitHubIdentity(username="same"))
        second = UserConfig(name="second", teams_webhook_url="u2", github=GitHubIdentity(username="same"))

        assert resolve_owner(github_comment(pr_author="same"), [first, second]) == first


class TestMentionMatching:
    """Word-boundary, case-insensitive @mentions."""

    def test_alias_matches_case_insensitively(self):
        assert find_mention("cc @Frontend-Team please review", ["frontend-team"]) == "frontend-team"

    def test_alias_requires_word_boundary(self):
        assert find_mention("cc @frontend-teams", ["frontend-team"]) is None

    def test_name_without_at_sign_is_not_a_mention(self):
        assert find_mention("frontend-team should look", ["frontend-team"]) is None

    def test_first_matching_name_wins(self):
        assert find_mention("@qa and @carol-dev", ["carol-dev", "qa"]) == "carol-dev"

    def test_regex_characters_in_names_are_literal(self):
        assert find_mention("ping @team.a", ["team.a"]) == "team.a"
        assert find_mention("ping @teamXa", ["team.a"]) is None

    def test_empty_body(self):
        assert find_mention("", ["alice"]) is None

    def test_watch_names_use_platform_username_then_aliases(self, alice, bob):
        assert watch_names(alice, ProviderType.GITHUB) == ["alice", "frontend-team"]
        assert watch_names(bob, ProviderType.GITHUB) == ["bob-team"]
        assert watch_names(bob, ProviderType.GITLAB) == ["bob", "bob-team"]

    def test_find_mentions_records_matched_alias(self, users):
        matches = find_mentions(github_comment(body="cc @QA and @frontend-team"), users)

        assert [(m.user.name, m.matched_alias) for m in matches] == [
            ("alice", "frontend-team"),
            ("carol", "qa"),
        ]
        assert all(m.role == RecipientRole.MENTIONED for m in matches)


class TestResolveRecipients:
    """Combined owner + mention resolution."""

    def test_owner_only(self, users):
        recipients = resolve_recipients(github_comment(pr_author="alice", body="looks good"), users)

        assert [(r.user.name, r.role) for r in recipients] == [("alice", RecipientRole.OWNER)]

    def test_owner_and_mentioned_user(self, users):
        recipients = resolve_recipients(github_comment(pr_author="alice", body="@qa can you check?"), users)

        assert [(r.user.name, r.role) for r in recipients] == [
            ("alice", RecipientRole.OWNER),
            ("carol", RecipientRole.MENTIONED),
        ]

    def test_owner_also_mentioned_is_notified_once(self, users):
        recipients = resolve_recipients(github_comment(pr_author="alice", body="@alice @frontend-team"), users)

        assert len(recipients) == 1
        assert recipients[0].role == RecipientRole.OWNER

    def test_gitlab_owner_precedence_over_mention(self, users):
        recipients = resolve_recipients(gitlab_comment(pr_author="999", commenter="dave",
                                                       body="hey @bob-team check this"), users)

        assert [(r.user.name, r.role) for r in recipients] == [("bob", RecipientRole.OWNER)]

    def test_self_comment_by_owner_is_suppressed(self, users):
        recipients = resolve_recipients(github_comment(pr_author="alice", commenter="ALICE"), users)

        assert recipients == []

    def test_self_mention_is_suppressed(self, users):
        recipients = resolve_recipients(github_comment(pr_author="nobody", commenter="Carol-Dev",
                                                       body="note to self @qa"), users)

        assert recipients == []

    def test_owner_self_comment_still_notifies_other_mentions(self, users):
        recipients = resolve_recipients(github_comment(pr_author="alice", commenter="alice",
                                                       body="@qa please verify"), users)

        assert [(r.user.name, r.role) for r in recipients] == [("carol", RecipientRole.MENTIONED)]

    def test_gitlab_self_comment_compares_usernames(self, users):
        recipients = resolve_recipients(gitlab_comment(pr_author="999", commenter="Bob"), users)

        assert recipients == []

    def test_allow_self_comments(self, users):
        recipients = resolve_recipients(github_comment(pr_author="alice", commenter="alice"), users,
                                        allow_self_comments=True)

        assert [r.role for r in recipients] == [RecipientRole.OWNER]

    @pytest.mark.parametrize("event", [
        MergeEvent(source=ProviderType.GITHUB, pr_author_identity="nobody", merged_by_identity="alice"),
        ReviewEvent(source=ProviderType.GITHUB, pr_author_identity="nobody", reviewed_by_identity="alice",
                    review_state=ReviewState.APPROVED, review_body="@qa @frontend-team"),
    ])
    def test_merge_and_review_have_no_mention_fallback(self, users, event):
        assert resolve_recipients(event, users) == []

    def test_merge_goes_to_owner(self, users, alice):
        event = MergeEvent(source=ProviderType.GITLAB, pr_author_identity="12345", merged_by_identity="lead")

        recipients = resolve_recipients(event, users)

        assert [(r.user, r.role) for r in recipients] == [(alice, RecipientRole.OWNER)]

    def test_no_recipients(self, users):
        assert resolve_recipients(github_comment(pr_author="stranger", body="no mentions"), users) == []

    def test_users_with_same_alias_are_each_notified(self):
        one = UserConfig(name="one", teams_webhook_url="u1", gitlab=GitLabIdentity(user_id=1),
                         mention_aliases=["ops"])
        two = UserConfig(name="two", teams_webhook_url="u2", gitlab=GitLabIdentity(user_id=2),
                         mention_aliases=["ops"])

        recipients = resolve_recipients(gitlab_comment(pr_author="3", body="@ops outage"), [one, two])

        assert [r.user.name for r in recipients] == ["one", "two"]
