"""
Recipient resolution: which registered users care about an event.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from loguru import logger

from src.config.users import UserConfig
from src.events.models import CommentEvent, NormalizedEvent, ProviderType


class RecipientRole(str, Enum):
    OWNER = "owner"
    MENTIONED = "mentioned"


@dataclass(frozen=True)
class RecipientMatch:
    """A user paired with the reason they are being notified."""
    user: UserConfig
    role: RecipientRole
    matched_alias: Optional[str] = None


def is_owner(user: UserConfig, event: NormalizedEvent) -> bool:
    """Check whether the user authored the PR/MR.

    GitHub matches on username (case-insensitive); GitLab matches on the
    numeric user id compared as a string.
    """
    author = event.pr_author_identity
    if not author:
        return False
    if event.source == ProviderType.GITHUB:
        username = user.github.username
        return bool(username) and author.lower() == username.lower()
    if event.source == ProviderType.GITLAB:
        return user.gitlab.user_id is not None and author == str(user.gitlab.user_id)
    return False


def resolve_owner(event: NormalizedEvent, users: Iterable[UserConfig]) -> Optional[UserConfig]:
    """Return the first user in registry order who owns the PR/MR."""
    for user in users:
        if is_owner(user, event):
            logger.debug(f"{event.source.value} author {event.pr_author_identity!r} matched user {user.name!r}")
            return user
    return None


def is_comment_author(user: UserConfig, event: CommentEvent) -> bool:
    """Check whether the user wrote the comment, by platform username."""
    username = user.username_for(event.source.value)
    author = event.comment_author_identity
    return bool(username) and bool(author) and author.lower() == username.lower()


def watch_names(user: UserConfig, source: ProviderType) -> List[str]:
    """The user's own username for the platform followed by their aliases."""
    names: List[str] = []
    for name in (user.username_for(source.value), *user.mention_aliases):
        if name and name not in names:
            names.append(name)
    return names


def find_mention(text: str, names: Iterable[str]) -> Optional[str]:
    """Return the first name mentioned as ``@name`` on a word boundary, ignoring case."""
    if not text:
        return None
    for name in names:
        if re.search(rf"@{re.escape(name)}\b", text, re.IGNORECASE):
            return name
    return None


def find_mentions(event: CommentEvent, users: Iterable[UserConfig]) -> List[RecipientMatch]:
    """All users mentioned in a comment body, in registry order."""
    matches = []
    for user in users:
        alias = find_mention(event.comment_body, watch_names(user, event.source))
        if alias:
            logger.debug(f"Mention detected for {user.name!r}: @{alias}")
            matches.append(RecipientMatch(user=user, role=RecipientRole.MENTIONED, matched_alias=alias))
    return matches


def resolve_recipients(
    event: NormalizedEvent,
    users: Iterable[UserConfig],
    allow_self_comments: bool = False,
) -> List[RecipientMatch]:
    """Resolve who to notify, at most once per user, owner first.

    Merge and review events only ever go to the owner. Comment events also
    go to mentioned users; nobody is notified about their own comment unless
    ``allow_self_comments`` is set.
    """
    users = list(users)
    recipients: List[RecipientMatch] = []

    owner = resolve_owner(event, users)
    if owner is not None:
        if isinstance(event, CommentEvent) and not allow_self_comments and is_comment_author(owner, event):
            logger.info(f"Ignoring self-comment by owner {owner.name!r}")
        else:
            recipients.append(RecipientMatch(user=owner, role=RecipientRole.OWNER))

    if not isinstance(event, CommentEvent):
        return recipients

    notified = {match.user.name for match in recipients}
    for match in find_mentions(event, users):
        if match.user.name in notified:
            logger.debug(f"Skipping mention of {match.user.name!r}: already notified as owner")
            continue
        if not allow_self_comments and is_comment_author(match.user, event):
            logger.info(f"Ignoring self-mention by {match.user.name!r}")
            continue
        recipients.append(match)
        notified.add(match.user.name)

    return recipients
