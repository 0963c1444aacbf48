"""
Event dispatch: classify a webhook payload, resolve recipients, and deliver cards.
"""

from typing import Any, Dict, Iterable, Optional

from loguru import logger

from src.config.users import UserConfig
from src.events.models import (
    DeliveryOutcome,
    DispatchResult,
    NormalizedEvent,
    ProviderType,
    ReviewEvent,
)
from src.events.normalizers import normalize
from src.events.recipients import RecipientMatch, resolve_recipients
from src.notifications.cards import compose
from src.notifications.teams import TeamsNotifier

REASON_UNRECOGNIZED = "not a recognized PR/MR event"
REASON_NO_RECIPIENTS = "no configured recipients"
REASON_DELIVERY_FAILED = "delivery failed"


class EventProcessor:
    """Processes webhook events and notifies the users who care about them."""

    def __init__(
        self,
        users: Iterable[UserConfig],
        notifier: Optional[TeamsNotifier] = None,
        allow_self_comments: bool = False,
    ):
        self.users = tuple(users)
        self.notifier = notifier or TeamsNotifier()
        self.allow_self_comments = allow_self_comments

    async def process(self, source: ProviderType, payload: Dict[str, Any]) -> DispatchResult:
        """
        Process one webhook delivery.

        Args:
            source: The provider the payload came from
            payload: The decoded webhook body

        Returns:
            DispatchResult: What the event was and who was notified
        """
        event = normalize(source, payload)
        if event is None:
            logger.info(f"Ignoring {source.value} event - {REASON_UNRECOGNIZED}")
            return DispatchResult(processed=False, source=source, reason=REASON_UNRECOGNIZED)

        logger.info(f"Classified {source.value} event as {event.kind.value} on "
                    f"{event.repo_name} {event.pr_label} \"{event.pr_title}\"")

        result = DispatchResult(
            processed=False,
            source=source,
            kind=event.kind,
            review_state=event.review_state if isinstance(event, ReviewEvent) else None,
        )

        recipients = resolve_recipients(event, self.users, self.allow_self_comments)
        if not recipients:
            logger.info(f"Ignoring {event.kind.value} event - {REASON_NO_RECIPIENTS}")
            result.reason = REASON_NO_RECIPIENTS
            return result

        for match in recipients:
            result.deliveries.append(await self._deliver(event, match))

        result.processed = any(outcome.success for outcome in result.deliveries)
        if not result.processed:
            result.reason = REASON_DELIVERY_FAILED

        sent = sum(outcome.success for outcome in result.deliveries)
        logger.info(f"Delivered {sent}/{len(result.deliveries)} notifications for {event.kind.value} event")
        return result

    async def _deliver(self, event: NormalizedEvent, match: RecipientMatch) -> DeliveryOutcome:
        """Compose and send one card; a failure only affects this recipient."""
        if match.matched_alias:
            logger.info(f"Notifying {match.user.name!r} ({match.role.value} as @{match.matched_alias})")
        else:
            logger.info(f"Notifying {match.user.name!r} ({match.role.value})")

        try:
            card = compose(event, match)
            success = await self.notifier.send(card, match.user.teams_webhook_url)
        except Exception as e:
            logger.error(f"Error notifying {match.user.name!r}: {e}")
            success = False

        return DeliveryOutcome(
            user=match.user.name,
            role=match.role.value,
            matched_alias=match.matched_alias,
            success=success,
        )
