"""
Webhook handling module for the PR comment notifier.

This module provides the webhook server that receives GitHub and GitLab
PR/MR events and relays them to the right users on Microsoft Teams.
"""

from .webhook_server import WebhookServer, create_app
from .event_processor import EventProcessor
from .security import verify_github_signature, verify_gitlab_token

__all__ = [
    "WebhookServer",
    "create_app",
    "EventProcessor",
    "verify_github_signature",
    "verify_gitlab_token",
]
