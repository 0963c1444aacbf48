"""
Notification composition and delivery.
"""

from .cards import (
    build_comment_card,
    build_mention_card,
    build_merge_card,
    build_review_card,
    compose,
    truncate_body,
)
from .teams import TeamsNotifier

__all__ = [
    "TeamsNotifier",
    "build_comment_card",
    "build_mention_card",
    "build_merge_card",
    "build_review_card",
    "compose",
    "truncate_body",
]
