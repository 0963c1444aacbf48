"""
Configuration module for the PR comment notifier.
"""

from .users import ConfigError, GitHubIdentity, GitLabIdentity, UserConfig, UserRegistry, load_users
from .webhook_config import WebhookConfig

__all__ = [
    "ConfigError",
    "GitHubIdentity",
    "GitLabIdentity",
    "UserConfig",
    "UserRegistry",
    "WebhookConfig",
    "load_users",
]
