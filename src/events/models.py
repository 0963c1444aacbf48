"""
Normalized event and dispatch result models.
"""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


class ProviderType(str, Enum):
    """Supported webhook providers."""
    GITHUB = "github"
    GITLAB = "gitlab"


class EventKind(str, Enum):
    """Kinds of PR/MR events, in classification priority order."""
    MERGE = "merge"
    REVIEW = "review"
    COMMENT = "comment"


class ReviewState(str, Enum):
    APPROVED = "approved"
    CHANGES_REQUESTED = "changes_requested"


class PREvent(BaseModel):
    """Fields shared by every normalized PR/MR event."""
    source: ProviderType
    pr_author_identity: str = ""
    pr_title: str = ""
    pr_url: str = ""
    repo_name: str = ""

    @property
    def pr_label(self) -> str:
        """'PR' for GitHub, 'MR' for GitLab."""
        return "PR" if self.source == ProviderType.GITHUB else "MR"

    @property
    def source_label(self) -> str:
        return "GitHub" if self.source == ProviderType.GITHUB else "GitLab"


class CommentEvent(PREvent):
    """A comment (GitHub) or note (GitLab) on a PR/MR."""
    kind: Literal[EventKind.COMMENT] = EventKind.COMMENT
    comment_author_identity: str = ""
    comment_body: str = ""
    comment_url: str = ""
    file_path: Optional[str] = None


class MergeEvent(PREvent):
    kind: Literal[EventKind.MERGE] = EventKind.MERGE
    merged_by_identity: str = ""


class ReviewEvent(PREvent):
    """An approval or change request on a PR/MR."""
    kind: Literal[EventKind.REVIEW] = EventKind.REVIEW
    review_state: ReviewState
    reviewed_by_identity: str = ""
    review_body: Optional[str] = None


NormalizedEvent = Union[MergeEvent, ReviewEvent, CommentEvent]


class DeliveryOutcome(BaseModel):
    """Result of delivering one notification to one user."""
    user: str
    role: str
    matched_alias: Optional[str] = None
    success: bool


class DispatchResult(BaseModel):
    """Summary returned to the webhook caller."""
    processed: bool
    source: ProviderType
    kind: Optional[EventKind] = None
    review_state: Optional[ReviewState] = None
    reason: Optional[str] = None
    deliveries: list[DeliveryOutcome] = Field(default_factory=list)
