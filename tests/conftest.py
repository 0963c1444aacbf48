"""
Shared fixtures for notifier tests.
"""

import pytest

from src.config.users import GitHubIdentity, GitLabIdentity, UserConfig


@pytest.fixture
def alice():
    return UserConfig(
        name="alice",
        teams_webhook_url="https://teams.test/alice",
        github=GitHubIdentity(username="alice"),
        gitlab=GitLabIdentity(username="alice", user_id=12345),
        mention_aliases=["frontend-team"],
    )


@pytest.fixture
def bob():
    return UserConfig(
        name="bob",
        teams_webhook_url="https://teams.test/bob",
        gitlab=GitLabIdentity(username="bob", user_id=999),
        mention_aliases=["bob-team"],
    )


@pytest.fixture
def carol():
    return UserConfig(
        name="carol",
        teams_webhook_url="https://teams.test/carol",
        github=GitHubIdentity(username="Carol-Dev"),
        mention_aliases=["qa"],
    )


@pytest.fixture
def users(alice, bob, carol):
    return (alice, bob, carol)
