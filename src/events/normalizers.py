"""
Payload normalizers: turn raw GitHub/GitLab webhook bodies into normalized events.

Each normalizer returns ``None`` when the payload is not the event it handles.
``normalize`` walks the normalizers for a provider in ``EVENT_PRIORITY`` order
and returns the first match, since one delivery encodes exactly one event.
"""

from typing import Any, Callable, Dict, Optional

from src.events.models import (
    CommentEvent,
    EventKind,
    MergeEvent,
    NormalizedEvent,
    ProviderType,
    ReviewEvent,
    ReviewState,
)

Payload = Dict[str, Any]
Normalizer = Callable[[Payload], Optional[NormalizedEvent]]

EVENT_PRIORITY = (EventKind.MERGE, EventKind.REVIEW, EventKind.COMMENT)

# GitHub
PR_CLOSED_ACTION = "closed"
PR_REVIEW_SUBMITTED_ACTION = "submitted"
COMMENT_CREATED_ACTION = "created"

# GitLab
MERGE_REQUEST_OBJECT_KIND = "merge_request"
NOTE_OBJECT_KIND = "note"
MERGE_REQUEST_NOTEABLE_TYPE = "MergeRequest"
MR_MERGE_ACTION = "merge"
MR_APPROVED_ACTION = "approved"


def _get(data: Any, path: str, default: Any = None) -> Any:
    """Look up a dotted path in nested dicts, returning ``default`` if any step is missing."""
    current = data
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return default if current is None else current


def _text(data: Any, path: str) -> str:
    value = _get(data, path, "")
    return value if isinstance(value, str) else str(value)


def _identity(value: Any) -> str:
    """Stringify a numeric or string identity; missing values become ''."""
    if value is None or isinstance(value, bool):
        return ""
    return str(value)


# --- GitHub ---------------------------------------------------------------

def parse_github_merge(payload: Payload) -> Optional[MergeEvent]:
    """A pull request closed with ``merged: true``."""
    if payload.get("action") != PR_CLOSED_ACTION:
        return None
    pr = payload.get("pull_request")
    if not isinstance(pr, dict) or pr.get("merged") is not True:
        return None

    return MergeEvent(
        source=ProviderType.GITHUB,
        pr_author_identity=_text(pr, "user.login"),
        pr_title=_text(pr, "title"),
        pr_url=_text(pr, "html_url"),
        repo_name=_text(payload, "repository.full_name"),
        merged_by_identity=_text(pr, "merged_by.login") or _text(payload, "sender.login"),
    )


def parse_github_review(payload: Payload) -> Optional[ReviewEvent]:
    """A submitted review that approves or requests changes."""
    if payload.get("action") != PR_REVIEW_SUBMITTED_ACTION:
        return None
    review = payload.get("review")
    pr = payload.get("pull_request")
    if not isinstance(review, dict) or not isinstance(pr, dict):
        return None

    state = _text(review, "state").lower()
    try:
        review_state = ReviewState(state)
    except ValueError:
        return None

    return ReviewEvent(
        source=ProviderType.GITHUB,
        pr_author_identity=_text(pr, "user.login"),
        pr_title=_text(pr, "title"),
        pr_url=_text(pr, "html_url"),
        repo_name=_text(payload, "repository.full_name"),
        review_state=review_state,
        reviewed_by_identity=_text(review, "user.login"),
        review_body=_text(review, "body") or None,
    )


def _github_comment_event(payload: Payload, pr: Payload, comment: Payload, file_path: Optional[str]) -> CommentEvent:
    return CommentEvent(
        source=ProviderType.GITHUB,
        pr_author_identity=_text(pr, "user.login"),
        pr_title=_text(pr, "title"),
        pr_url=_text(pr, "html_url"),
        repo_name=_text(payload, "repository.full_name"),
        comment_author_identity=_text(comment, "user.login"),
        comment_body=_text(comment, "body"),
        comment_url=_text(comment, "html_url"),
        file_path=file_path,
    )


def parse_github_review_comment(payload: Payload) -> Optional[CommentEvent]:
    """A comment posted with the pull request object attached (review-line shape)."""
    if payload.get("action") != COMMENT_CREATED_ACTION:
        return None
    comment = payload.get("comment")
    pr = payload.get("pull_request")
    if not isinstance(comment, dict) or not isinstance(pr, dict):
        return None
    return _github_comment_event(payload, pr, comment, _text(comment, "path") or None)


def parse_github_issue_comment(payload: Payload) -> Optional[CommentEvent]:
    """A conversation comment on a PR, delivered as an issue comment."""
    if payload.get("action") != COMMENT_CREATED_ACTION:
        return None
    comment = payload.get("comment")
    issue = payload.get("issue")
    if not isinstance(comment, dict) or not isinstance(issue, dict):
        return None
    # Plain issues have no pull_request marker
    if "pull_request" not in issue:
        return None
    return _github_comment_event(payload, issue, comment, None)


def parse_github_comment(payload: Payload) -> Optional[CommentEvent]:
    # The review-line shape carries a superset of the issue-style fields
    return parse_github_review_comment(payload) or parse_github_issue_comment(payload)


# --- GitLab ---------------------------------------------------------------

def _gitlab_mr_action(payload: Payload, action: str) -> Optional[Payload]:
    if payload.get("object_kind") != MERGE_REQUEST_OBJECT_KIND:
        return None
    mr = payload.get("object_attributes")
    if not isinstance(mr, dict) or mr.get("action") != action:
        return None
    return mr


def parse_gitlab_merge(payload: Payload) -> Optional[MergeEvent]:
    """A merge request hook with action ``merge``."""
    mr = _gitlab_mr_action(payload, MR_MERGE_ACTION)
    if mr is None:
        return None

    return MergeEvent(
        source=ProviderType.GITLAB,
        pr_author_identity=_identity(mr.get("author_id")),
        pr_title=_text(mr, "title"),
        pr_url=_text(mr, "url"),
        repo_name=_text(payload, "project.path_with_namespace"),
        merged_by_identity=_text(payload, "user.username"),
    )


def parse_gitlab_approval(payload: Payload) -> Optional[ReviewEvent]:
    """A merge request hook with action ``approved``.

    GitLab sends no webhook for requested changes, so the state is always approved.
    """
    mr = _gitlab_mr_action(payload, MR_APPROVED_ACTION)
    if mr is None:
        return None

    return ReviewEvent(
        source=ProviderType.GITLAB,
        pr_author_identity=_identity(mr.get("author_id")),
        pr_title=_text(mr, "title"),
        pr_url=_text(mr, "url"),
        repo_name=_text(payload, "project.path_with_namespace"),
        review_state=ReviewState.APPROVED,
        reviewed_by_identity=_text(payload, "user.username"),
    )


def parse_gitlab_note(payload: Payload) -> Optional[CommentEvent]:
    """A note on a merge request.

    Note payloads only carry the MR author's numeric id, not a username.
    """
    if payload.get("object_kind") != NOTE_OBJECT_KIND:
        return None
    if _get(payload, "object_attributes.noteable_type") != MERGE_REQUEST_NOTEABLE_TYPE:
        return None
    mr = payload.get("merge_request")
    if not isinstance(mr, dict):
        return None

    return CommentEvent(
        source=ProviderType.GITLAB,
        pr_author_identity=_identity(mr.get("author_id")),
        pr_title=_text(mr, "title"),
        pr_url=_text(mr, "url"),
        repo_name=_text(payload, "project.path_with_namespace"),
        comment_author_identity=_text(payload, "user.username"),
        comment_body=_text(payload, "object_attributes.note"),
        comment_url=_text(payload, "object_attributes.url"),
    )


NORMALIZERS: Dict[tuple[ProviderType, EventKind], Normalizer] = {
    (ProviderType.GITHUB, EventKind.MERGE): parse_github_merge,
    (ProviderType.GITHUB, EventKind.REVIEW): parse_github_review,
    (ProviderType.GITHUB, EventKind.COMMENT): parse_github_comment,
    (ProviderType.GITLAB, EventKind.MERGE): parse_gitlab_merge,
    (ProviderType.GITLAB, EventKind.REVIEW): parse_gitlab_approval,
    (ProviderType.GITLAB, EventKind.COMMENT): parse_gitlab_note,
}


def normalize(source: ProviderType, payload: Any) -> Optional[NormalizedEvent]:
    """Classify a payload, trying merge, then review, then comment."""
    if not isinstance(payload, dict):
        return None
    for kind in EVENT_PRIORITY:
        event = NORMALIZERS[(source, kind)](payload)
        if event is not None:
            return event
    return None
