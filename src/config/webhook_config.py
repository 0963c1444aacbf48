"""
Configuration management for webhook server.
"""

import os
from typing import Optional
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from src.config.users import UserConfig, load_users


class WebhookConfig(BaseModel):
    """Main webhook configuration."""

    # Inbound verification; no secret means verification is skipped
    github_secret: Optional[str] = Field(default=None)
    gitlab_secret: Optional[str] = Field(default=None)

    # Registered recipients
    users: tuple[UserConfig, ...] = Field(default=())

    # Notify users about their own comments (for testing)
    allow_self_comments: bool = Field(default=False)

    # Outbound Teams delivery
    delivery_timeout: float = Field(default=10.0)

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default="logs/webhook_server.log")

    @classmethod
    def from_env(cls) -> "WebhookConfig":
        """Create configuration from environment variables (and a .env file)."""
        load_dotenv()
        return cls(
            github_secret=os.getenv("GITHUB_WEBHOOK_SECRET") or None,
            gitlab_secret=os.getenv("GITLAB_WEBHOOK_TOKEN") or os.getenv("GITLAB_WEBHOOK_SECRET") or None,
            users=tuple(load_users()),
            allow_self_comments=os.getenv("ALLOW_SELF_COMMENTS", "false").lower() == "true",
            delivery_timeout=float(os.getenv("DELIVERY_TIMEOUT", "10")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/webhook_server.log") or None,
        )
