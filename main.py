"""
Main entry point for the PR comment notifier webhook server.
"""

import sys

from loguru import logger

from src.config import ConfigError, WebhookConfig
from src.webhooks import create_app


def main():
    """Main entry point."""
    # Load configuration
    try:
        config = WebhookConfig.from_env()
        app = create_app(config)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        logger.error("Set USERS_CONFIG, USERS_CONFIG_PATH or TEAMS_WEBHOOK_URL (see .env.example)")
        sys.exit(1)

    logger.info(f"GitHub webhook URL: http://localhost:{config.port}/webhook/github")
    logger.info(f"GitLab webhook URL: http://localhost:{config.port}/webhook/gitlab")
    logger.info(f"Health check: http://localhost:{config.port}/health")

    # Run server
    import uvicorn
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower()
    )


if __name__ == "__main__":
    main()
