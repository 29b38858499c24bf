"""GitHub webhook intake: event normalization, handlers, HTTP server."""

from pullpal.webhook.events import InvalidEventError, WebhookEvent, parse_event
from pullpal.webhook.handlers import handle_github_event

__all__ = ["InvalidEventError", "WebhookEvent", "handle_github_event", "parse_event"]
