"""Configuration loading from YAML and environment.

Secrets (GitHub token, webhook secret, Slack token) are taken from
environment variables or from files (Docker secrets). Never put real tokens
in config files committed to the repo.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


def _is_placeholder(value: str | None) -> bool:
    return not value or value.startswith("${") or value.startswith("your-")


# Injected by load_config so secret resolution can read env/file
_current_env: dict[str, str] = {}


class BotConfig(BaseSettings):
    """Service identity and tracked repository."""

    model_config = SettingsConfigDict(env_prefix="BOT_", extra="ignore")

    name: str = Field(default="PullPal", description="Service display name")
    repository: str = Field(default="owner/repo", description="Tracked repo e.g. octocat/hello-world")

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo_name(self) -> str:
        parts = self.repository.split("/", 1)
        return parts[1] if len(parts) == 2 else ""


class GitHubConfig(BaseSettings):
    """GitHub API and webhook settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    webhook_path: str = Field(default="/webhooks/github", description="Webhook URL path")
    webhook_secret: str = Field(default="", description="Secret for webhook signature verification")


class SlackConfig(BaseSettings):
    """Slack notification channel settings."""

    model_config = SettingsConfigDict(env_prefix="SLACK_", extra="ignore")

    token: str | None = Field(default=None, description="Bot token; use env or secret file")
    channel: str = Field(default="#pull-requests", description="Channel for notifications")
    api_url: str = Field(default="https://slack.com/api", description="Slack Web API base URL")


class TrackerConfig(BaseSettings):
    """PR tracker settings."""

    model_config = SettingsConfigDict(env_prefix="TRACKER_", extra="ignore")

    # Hours without review before an open PR is reported stale (env: TRACKER_STALE_PR_HOURS)
    stale_pr_hours: int = Field(default=24, ge=1, description="Staleness threshold in hours")


class SchedulerConfig(BaseSettings):
    """Scheduled jobs: reconciliation, stale check, daily summary."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_", extra="ignore")

    enabled: bool = Field(default=True, description="Run scheduled jobs")
    sync_interval_seconds: int = Field(default=900, ge=30, description="Reconciliation interval")
    stale_check_interval_seconds: int = Field(default=3600, ge=30, description="Stale PR check interval")
    daily_summary_interval_seconds: int = Field(default=86400, ge=60, description="Summary interval")
    initial_sync: bool = Field(default=True, description="Reconcile once on startup")


class MetricsConfig(BaseSettings):
    """Metrics sampling settings."""

    model_config = SettingsConfigDict(env_prefix="METRICS_", extra="ignore")

    closed_sample_size: int = Field(default=50, ge=1, le=100, description="Closed PRs fetched per metrics run")
    merged_sample_size: int = Field(default=30, ge=1, description="Merged PRs analysed per metrics run")
    period_days: int = Field(default=7, ge=1, description="Default window for period metrics")


class WebhookConfig(BaseSettings):
    """Webhook server settings."""

    model_config = SettingsConfigDict(env_prefix="WEBHOOK_", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=3000, ge=0, le=65535, description="Bind port")
    enabled: bool = Field(default=True, description="Enable webhook server")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    bot: BotConfig = Field(default_factory=BotConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    slack: SlackConfig = Field(default_factory=SlackConfig)
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if not _is_placeholder(t):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")

    @property
    def webhook_secret_resolved(self) -> str:
        """Resolve webhook secret; empty string disables verification."""
        s = self.github.webhook_secret
        if not _is_placeholder(s):
            return s
        return _read_secret("GITHUB_WEBHOOK_SECRET", "GITHUB_WEBHOOK_SECRET_FILE") or ""

    @property
    def slack_token_resolved(self) -> str | None:
        """Resolve Slack bot token; None disables notifications."""
        t = self.slack.token
        if not _is_placeholder(t):
            return t
        return _read_secret("SLACK_BOT_TOKEN", "SLACK_BOT_TOKEN_FILE")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Secrets: GITHUB_TOKEN or GITHUB_TOKEN_FILE, GITHUB_WEBHOOK_SECRET or
    GITHUB_WEBHOOK_SECRET_FILE, SLACK_BOT_TOKEN or SLACK_BOT_TOKEN_FILE.
    """
    global _current_env

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text()) or {}
    raw = _substitute_env(raw)

    # Env overrides for nested values (e.g. BOT_REPOSITORY)
    bot_raw = raw.get("bot") or {}
    if _current_env.get("BOT_REPOSITORY"):
        bot_raw = {**bot_raw, "repository": _current_env.get("BOT_REPOSITORY")}

    return AppConfig(
        bot=BotConfig(**bot_raw),
        github=GitHubConfig(**(raw.get("github") or {})),
        slack=SlackConfig(**(raw.get("slack") or {})),
        tracker=TrackerConfig(**(raw.get("tracker") or {})),
        scheduler=SchedulerConfig(**(raw.get("scheduler") or {})),
        metrics=MetricsConfig(**(raw.get("metrics") or {})),
        webhook=WebhookConfig(**(raw.get("webhook") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
