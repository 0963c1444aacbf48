"""
Teams Adaptive Card builders for PR/MR notifications.

All builders are pure: they take a normalized event and return the JSON
message body that a Teams incoming webhook accepts.
"""

from typing import Any, Dict, List, Optional

from src.events.models import CommentEvent, MergeEvent, NormalizedEvent, ReviewEvent, ReviewState
from src.events.recipients import RecipientMatch, RecipientRole

MAX_BODY_LENGTH = 500
ADAPTIVE_CARD_SCHEMA = "http://adaptivecards.io/schemas/adaptive-card.json"
ADAPTIVE_CARD_VERSION = "1.4"

Card = Dict[str, Any]


def truncate_body(text: str, limit: int = MAX_BODY_LENGTH) -> str:
    """Cut text to ``limit`` characters, marking the cut with '...'."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def _fact(title: str, value: str) -> Dict[str, str]:
    return {"title": title, "value": value}


def _open_url(title: str, url: str) -> Dict[str, str]:
    return {"type": "Action.OpenUrl", "title": title, "url": url}


def _text_block(text: str) -> Dict[str, Any]:
    return {"type": "TextBlock", "text": text, "wrap": True, "separator": True}


def _base_facts(event: NormalizedEvent) -> List[Dict[str, str]]:
    return [
        _fact("Source:", event.source_label),
        _fact("Repository:", event.repo_name),
        _fact(f"{event.pr_label}:", event.pr_title),
    ]


def _message(
    title: str,
    color: str,
    facts: List[Dict[str, str]],
    actions: List[Dict[str, str]],
    body_text: Optional[str] = None,
) -> Card:
    """Wrap a title, facts, optional text, and actions in a Teams message."""
    body: List[Dict[str, Any]] = [
        {
            "type": "TextBlock",
            "text": title,
            "weight": "Bolder",
            "size": "Medium",
            "color": color,
        },
        {"type": "FactSet", "facts": facts},
    ]
    if body_text is not None:
        body.append(_text_block(truncate_body(body_text)))

    return {
        "type": "message",
        "attachments": [
            {
                "contentType": "application/vnd.microsoft.card.adaptive",
                "contentUrl": None,
                "content": {
                    "type": "AdaptiveCard",
                    "$schema": ADAPTIVE_CARD_SCHEMA,
                    "version": ADAPTIVE_CARD_VERSION,
                    "body": body,
                    "actions": actions,
                },
            }
        ],
    }


def _comment_actions(event: CommentEvent) -> List[Dict[str, str]]:
    return [
        _open_url("View Comment", event.comment_url),
        _open_url(f"View {event.pr_label}", event.pr_url),
    ]


def build_comment_card(event: CommentEvent) -> Card:
    """Card for the PR/MR owner when someone comments on it."""
    author = event.comment_author_identity
    if event.file_path:
        title = f"💬 Code Review Comment from {author}"
    else:
        title = f"💬 {author} commented on your {event.pr_label}"

    facts = _base_facts(event) + [_fact("Comment by:", author)]
    if event.file_path:
        facts.append(_fact("File:", event.file_path))

    return _message(title, "Accent", facts, _comment_actions(event), event.comment_body)


def build_mention_card(event: CommentEvent, mentioned_as: str) -> Card:
    """Card for a user whose name or alias was mentioned in a comment."""
    author = event.comment_author_identity
    facts = _base_facts(event) + [_fact("Mentioned by:", author)]
    if event.file_path:
        facts.append(_fact("File:", event.file_path))

    return _message(
        f"📢 {author} mentioned you (@{mentioned_as})",
        "Attention",
        facts,
        _comment_actions(event),
        event.comment_body,
    )


def build_merge_card(event: MergeEvent) -> Card:
    merged_by = event.merged_by_identity
    facts = _base_facts(event) + [_fact("Merged by:", merged_by)]
    return _message(
        f"🎉 {merged_by} merged your {event.pr_label}",
        "Good",
        facts,
        [_open_url(f"View {event.pr_label}", event.pr_url)],
    )


def build_review_card(event: ReviewEvent) -> Card:
    """Card for an approval or a change request."""
    reviewer = event.reviewed_by_identity
    if event.review_state == ReviewState.APPROVED:
        title = f"✅ {reviewer} approved your {event.pr_label}"
        color = "Good"
    else:
        title = f"⚠️ {reviewer} requested changes on your {event.pr_label}"
        color = "Warning"

    facts = _base_facts(event) + [_fact("Reviewed by:", reviewer)]
    return _message(
        title,
        color,
        facts,
        [_open_url(f"View {event.pr_label}", event.pr_url)],
        event.review_body or None,
    )


def compose(event: NormalizedEvent, match: RecipientMatch) -> Card:
    """Pick the card variant for an event and the recipient's role."""
    if isinstance(event, MergeEvent):
        return build_merge_card(event)
    if isinstance(event, ReviewEvent):
        return build_review_card(event)
    if match.role == RecipientRole.MENTIONED:
        return build_mention_card(event, match.matched_alias or "")
    return build_comment_card(event)
