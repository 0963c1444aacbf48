"""
Webhook server for receiving GitHub and GitLab PR/MR events.
Handles webhook verification, event dispatch, and health checks.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, HTTPException, Header
from loguru import logger

from src.config.users import UserRegistry
from src.config.webhook_config import WebhookConfig
from src.events.models import DispatchResult, ProviderType
from src.notifications.teams import TeamsNotifier
from src.webhooks.event_processor import EventProcessor
from src.webhooks.security import verify_github_signature, verify_gitlab_token


class WebhookServer:
    """Main webhook server class."""

    def __init__(self, config: WebhookConfig, notifier: Optional[TeamsNotifier] = None):
        self.config = config
        self._setup_logging()
        # Refuses to start with an empty or invalid user list
        self.registry = UserRegistry(config.users)
        self.processor = EventProcessor(
            self.registry,
            notifier=notifier or TeamsNotifier(timeout=config.delivery_timeout),
            allow_self_comments=config.allow_self_comments,
        )
        self.app = FastAPI(title="PR Comment Notifier", version="1.0.0")
        self._setup_routes()
        self._log_startup()

    def _setup_logging(self):
        """Configure logging."""
        if self.config.log_file:
            logger.add(
                self.config.log_file,
                rotation="1 day",
                retention="30 days",
                level=self.config.log_level.upper()
            )

    def _log_startup(self):
        logger.info(f"Loaded {len(self.registry)} user(s); "
                    f"GitHub secret {'SET' if self.config.github_secret else 'NOT SET'}, "
                    f"GitLab token {'SET' if self.config.gitlab_secret else 'NOT SET'}")
        for user in self.registry:
            logger.info(f"User {user.name!r}: github={user.github.username!r} "
                        f"gitlab={user.gitlab.username!r} gitlab_id={user.gitlab.user_id!r} "
                        f"aliases={list(user.mention_aliases)} "
                        f"teams_webhook={'SET' if user.teams_webhook_url else 'NOT SET'}")
        if self.config.allow_self_comments:
            logger.warning("ALLOW_SELF_COMMENTS is enabled; users will be notified about their own comments")

    def _setup_routes(self):
        """Setup FastAPI routes."""

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            return {
                "status": "healthy",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "users": len(self.registry),
            }

        @self.app.post("/webhook/github", response_model=DispatchResult)
        async def github_webhook(
            request: Request,
            x_github_event: Optional[str] = Header(None, alias="X-GitHub-Event"),
            x_github_delivery: Optional[str] = Header(None, alias="X-GitHub-Delivery"),
            x_hub_signature_256: Optional[str] = Header(None, alias="X-Hub-Signature-256")
        ):
            """Handle GitHub webhooks."""
            logger.info(f"Received GitHub webhook: event={x_github_event}, delivery={x_github_delivery}")
            raw_body = await request.body()

            if not verify_github_signature(raw_body, x_hub_signature_256, self.config.github_secret):
                logger.error("Invalid GitHub signature")
                raise HTTPException(status_code=401, detail="Invalid signature")

            payload = self._parse_body(raw_body)
            return await self._dispatch(ProviderType.GITHUB, payload)

        @self.app.post("/webhook/gitlab", response_model=DispatchResult)
        async def gitlab_webhook(
            request: Request,
            x_gitlab_event: Optional[str] = Header(None, alias="X-Gitlab-Event"),
            x_gitlab_token: Optional[str] = Header(None, alias="X-Gitlab-Token")
        ):
            """Handle GitLab webhooks."""
            logger.info(f"Received GitLab webhook: event={x_gitlab_event}")
            raw_body = await request.body()

            if not verify_gitlab_token(x_gitlab_token, self.config.gitlab_secret):
                logger.error("Invalid GitLab token")
                raise HTTPException(status_code=401, detail="Invalid token")

            payload = self._parse_body(raw_body)
            return await self._dispatch(ProviderType.GITLAB, payload)

    @staticmethod
    def _parse_body(raw_body: bytes) -> Any:
        try:
            return json.loads(raw_body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise HTTPException(status_code=400, detail="Invalid JSON body")

    async def _dispatch(self, source: ProviderType, payload: Dict[str, Any]) -> DispatchResult:
        try:
            return await self.processor.process(source, payload)
        except Exception as e:
            logger.error(f"Error processing {source.value} webhook: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")


def create_app(config: Optional[WebhookConfig] = None, notifier: Optional[TeamsNotifier] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if config is None:
        config = WebhookConfig.from_env()

    server = WebhookServer(config, notifier=notifier)
    return server.app
