"""
PR/MR event classification and recipient resolution.
"""

from .models import (
    CommentEvent,
    DeliveryOutcome,
    DispatchResult,
    EventKind,
    MergeEvent,
    NormalizedEvent,
    ProviderType,
    ReviewEvent,
    ReviewState,
)
from .normalizers import normalize
from .recipients import RecipientMatch, RecipientRole, resolve_recipients

__all__ = [
    "CommentEvent",
    "DeliveryOutcome",
    "DispatchResult",
    "EventKind",
    "MergeEvent",
    "NormalizedEvent",
    "ProviderType",
    "RecipientMatch",
    "RecipientRole",
    "ReviewEvent",
    "ReviewState",
    "normalize",
    "resolve_recipients",
]
