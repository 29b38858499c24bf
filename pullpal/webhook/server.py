"""HTTP server for GitHub webhooks and the operational endpoints.

Routes:
- GET /, /health: service status
- GET /metrics: PR metrics (JSON)
- GET /metrics/period?days=N: activity for PRs created in the last N days
- POST /check-stale-prs: run the stale PR check now
- POST {github.webhook_path}: GitHub webhook (HMAC SHA-256 verified)

One thread per request (ThreadingHTTPServer); the tracker store serializes
writers.
"""

import hashlib
import hmac
import json
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qs, urlparse

from pullpal import __version__
from pullpal.webhook.events import InvalidEventError

LOG = logging.getLogger("pullpal.webhook.server")

SIGNATURE_HEADER = "X-Hub-Signature-256"


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """Check GitHub's sha256 HMAC of the raw body.

    An empty secret disables verification (logged as a warning).
    """
    if not secret:
        LOG.warning("Webhook secret not set - skipping signature verification")
        return True
    if not signature:
        return False
    digest = "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(digest, signature)


class WebhookHandler(BaseHTTPRequestHandler):
    """Handle health, metrics, stale check and GitHub webhook requests."""

    app: Any

    def _send_json(self, status: int, data: Any) -> None:
        body = json.dumps(data).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self) -> None:
        url = urlparse(self.path)
        if url.path in ("/", "/health"):
            self._send_json(
                200,
                {"service": self.app.config.bot.name, "status": "running", "version": __version__},
            )
            return
        if url.path == "/metrics":
            self._handle_metrics()
            return
        if url.path == "/metrics/period":
            self._handle_period_metrics(parse_qs(url.query))
            return
        self._send_json(404, {"error": "Not found"})

    def do_POST(self) -> None:
        if self.path == self.app.config.github.webhook_path:
            self._handle_github_webhook()
            return
        if self.path == "/check-stale-prs":
            self._handle_check_stale()
            return
        self._send_json(404, {"error": "Not found"})

    def _handle_metrics(self) -> None:
        try:
            metrics = self.app.metrics.get_pr_metrics(self.app.owner, self.app.repo)
        except Exception as e:
            LOG.exception("Error fetching metrics: %s", e)
            self._send_json(500, {"error": "Failed to fetch metrics"})
            return
        self._send_json(200, metrics.model_dump(mode="json"))

    def _handle_period_metrics(self, query: dict) -> None:
        raw_days = (query.get("days") or [str(self.app.config.metrics.period_days)])[0]
        try:
            days = int(raw_days)
        except ValueError:
            self._send_json(400, {"error": f"Invalid days: {raw_days}"})
            return
        try:
            metrics = self.app.metrics.get_metrics_for_period(self.app.owner, self.app.repo, days=days)
        except Exception as e:
            LOG.exception("Error fetching period metrics: %s", e)
            self._send_json(500, {"error": "Failed to fetch metrics"})
            return
        self._send_json(200, metrics.model_dump(mode="json"))

    def _handle_check_stale(self) -> None:
        from pullpal.scheduler import check_stale_prs

        try:
            stale = check_stale_prs(self.app)
        except Exception as e:
            LOG.exception("Error checking stale PRs: %s", e)
            self._send_json(500, {"error": "Failed to check stale PRs"})
            return
        self._send_json(200, {"message": "Stale PR check completed", "stale": len(stale)})

    def _handle_github_webhook(self) -> None:
        from pullpal.webhook.handlers import handle_github_event

        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length) if length else b""
        if not verify_signature(self.app.config.webhook_secret_resolved, body, self.headers.get(SIGNATURE_HEADER)):
            LOG.warning("Rejected webhook with invalid signature")
            self._send_json(401, {"error": "Invalid webhook signature"})
            return
        try:
            payload = json.loads(body.decode()) if body else {}
        except (json.JSONDecodeError, UnicodeDecodeError):
            LOG.warning("Invalid webhook JSON (%s bytes)", len(body))
            self._send_json(400, {"error": "Invalid JSON"})
            return
        event = self.headers.get("X-GitHub-Event", "")
        try:
            handle_github_event(self.app.config, event, payload, self.app.ingestion, self.app.notifier)
        except InvalidEventError as e:
            LOG.warning("Rejected webhook %s: %s", event, e)
            self._send_json(400, {"error": str(e)})
            return
        except Exception as e:
            LOG.exception("Webhook processing error: %s", e)
            self._send_json(500, {"error": "Failed to process webhook"})
            return
        self._send_json(200, {"message": "Webhook processed"})

    def log_message(self, format: str, *args: Any) -> None:
        LOG.debug(format, *args)


def make_server(app: Any, host: str | None = None, port: int | None = None) -> ThreadingHTTPServer:
    """Create (but do not start) the HTTP server bound to host:port."""
    handler = type("BoundWebhookHandler", (WebhookHandler,), {"app": app})
    server = ThreadingHTTPServer(
        (host if host is not None else app.config.webhook.host, port if port is not None else app.config.webhook.port),
        handler,
    )
    server.daemon_threads = True
    return server


def run_webhook_server(app: Any) -> None:
    """Run HTTP server for webhooks, metrics and health check."""
    server = make_server(app)
    host, port = server.server_address[:2]
    LOG.info("PullPal server listening on %s:%s", host, port)
    LOG.info("Webhook endpoint: %s", app.config.github.webhook_path)
    server.serve_forever()
