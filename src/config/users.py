"""
User registry: who gets notified, and where.

Users are loaded once at startup from inline JSON, a JSON file, or the
legacy single-user environment variables, and are never mutated afterwards.
"""

import json
import os
from pathlib import Path
from typing import Iterator, Optional, Sequence

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

PLACEHOLDER_WEBHOOK_URL = "YOUR_TEAMS_INCOMING_WEBHOOK_URL"


class ConfigError(ValueError):
    """Raised when the static configuration cannot be used to start the server."""


class GitHubIdentity(BaseModel):
    """GitHub identity of a user."""
    model_config = ConfigDict(frozen=True)

    username: Optional[str] = None


class GitLabIdentity(BaseModel):
    """GitLab identity of a user.

    MR payloads only carry the numeric author id, so ``user_id`` is what
    ownership is matched on; ``username`` is used for mentions and for
    recognising the user's own notes.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    username: Optional[str] = None
    user_id: Optional[int] = Field(default=None, alias="userId")


class UserConfig(BaseModel):
    """A registered recipient."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    teams_webhook_url: str = Field(alias="teamsWebhookUrl")
    github: GitHubIdentity = Field(default_factory=GitHubIdentity)
    gitlab: GitLabIdentity = Field(default_factory=GitLabIdentity)
    mention_aliases: tuple[str, ...] = Field(default=(), alias="mentionAliases")

    @field_validator("name", "teams_webhook_url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("mention_aliases", mode="before")
    @classmethod
    def _clean_aliases(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        aliases: list[str] = []
        for alias in value:
            alias = str(alias).strip().lstrip("@")
            if alias and alias not in aliases:
                aliases.append(alias)
        return tuple(aliases)

    def username_for(self, source: str) -> Optional[str]:
        """Return the user's username on the given platform, if configured."""
        if source == "github":
            return self.github.username
        if source == "gitlab":
            return self.gitlab.username
        return None

    @property
    def has_identity(self) -> bool:
        return bool(self.github.username or self.gitlab.username or self.gitlab.user_id is not None)


class UserRegistry:
    """Immutable, ordered collection of registered users."""

    def __init__(self, users: Sequence[UserConfig]):
        users = tuple(users)
        if not users:
            raise ConfigError("No users configured; at least one user is required")

        seen: set[str] = set()
        for user in users:
            if user.name in seen:
                raise ConfigError(f"Duplicate user name in configuration: {user.name!r}")
            seen.add(user.name)
            if user.teams_webhook_url == PLACEHOLDER_WEBHOOK_URL:
                raise ConfigError(f"User {user.name!r} still has the placeholder Teams webhook URL")
            if not user.has_identity:
                logger.warning(f"User {user.name!r} has no GitHub or GitLab identity and will never be notified")

        self._users = users

    def __iter__(self) -> Iterator[UserConfig]:
        return iter(self._users)

    def __len__(self) -> int:
        return len(self._users)

    def get(self, name: str) -> Optional[UserConfig]:
        for user in self._users:
            if user.name == name:
                return user
        return None


def parse_users(raw: object) -> list[UserConfig]:
    """Validate a decoded JSON document (a list, or ``{"users": [...]}``)."""
    if isinstance(raw, dict) and "users" in raw:
        raw = raw["users"]
    if not isinstance(raw, list):
        raise ConfigError("User configuration must be a JSON list of users")

    users = []
    for index, entry in enumerate(raw):
        try:
            users.append(UserConfig.model_validate(entry))
        except ValidationError as e:
            raise ConfigError(f"Invalid user entry #{index}: {e}") from e
    return users


def _users_from_legacy_env() -> list[UserConfig]:
    """Build a single user from the one-user environment variables."""
    webhook_url = os.getenv("TEAMS_WEBHOOK_URL")
    if not webhook_url:
        return []

    github_username = os.getenv("GITHUB_USERNAME") or None
    gitlab_username = os.getenv("GITLAB_USERNAME") or None
    gitlab_user_id = os.getenv("GITLAB_USER_ID")
    try:
        user_id = int(gitlab_user_id) if gitlab_user_id else None
    except ValueError as e:
        raise ConfigError(f"GITLAB_USER_ID must be numeric, got {gitlab_user_id!r}") from e

    name = os.getenv("USER_NAME") or github_username or gitlab_username or "default"
    return [
        UserConfig(
            name=name,
            teams_webhook_url=webhook_url,
            github=GitHubIdentity(username=github_username),
            gitlab=GitLabIdentity(username=gitlab_username, user_id=user_id),
            mention_aliases=os.getenv("MENTION_ALIASES", ""),
        )
    ]


def load_users(path: Optional[str] = None) -> list[UserConfig]:
    """Load users from USERS_CONFIG, a JSON file, or legacy env vars, in that order."""
    inline = os.getenv("USERS_CONFIG")
    if inline:
        try:
            raw = json.loads(inline)
        except json.JSONDecodeError as e:
            raise ConfigError(f"USERS_CONFIG is not valid JSON: {e}") from e
        logger.info("Loading users from USERS_CONFIG")
        return parse_users(raw)

    config_path = Path(path or os.getenv("USERS_CONFIG_PATH", "users.json"))
    if config_path.is_file():
        try:
            raw = json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"{config_path} is not valid JSON: {e}") from e
        logger.info(f"Loading users from {config_path}")
        return parse_users(raw)

    users = _users_from_legacy_env()
    if users:
        logger.info("Loading single user from TEAMS_WEBHOOK_URL environment variables")
    return users
