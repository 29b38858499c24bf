"""PullPal entry point.

Modes: daemon (webhook server + scheduled jobs, default), and one-shot
commands that reconcile with GitHub and print the result: sync, metrics,
check-stale. Usage: pullpal [daemon|sync|metrics|check-stale] [-c config.yaml].
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pullpal.config import AppConfig, load_config

SUBCOMMANDS = ("daemon", "sync", "metrics", "check-stale")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional subcommand (daemon is the default)."""
    argv = argv if argv is not None else sys.argv[1:]
    sub = "daemon"
    rest = list(argv)
    if argv and not argv[0].startswith("-") and argv[0] in SUBCOMMANDS:
        sub = argv[0]
        rest = argv[1:]

    parser = argparse.ArgumentParser(
        prog="pullpal",
        description="PullPal - PR review tracker: daemon, sync, metrics or check-stale",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="metrics: also report activity for PRs created in the last N days",
    )
    parsed = parser.parse_args(rest)
    parsed.subcommand = sub
    return parsed


def _run_once(config: AppConfig, subcommand: str, days: int | None) -> dict:
    from pullpal.app import build_app
    from pullpal.logging import PullPalLogging
    from pullpal.scheduler import check_stale_prs

    logs = PullPalLogging(config.logging)
    logs.setup()
    logs.get_logger("pullpal.main").info("Running %s for %s", subcommand, config.bot.repository)
    app = build_app(config)
    if subcommand == "sync":
        return app.reconciler.sync(app.owner, app.repo).model_dump()
    if subcommand == "check-stale":
        return {"stale": [n.model_dump() for n in check_stale_prs(app)]}
    app.reconciler.sync(app.owner, app.repo)
    result = {"metrics": app.metrics.get_pr_metrics(app.owner, app.repo).model_dump(mode="json")}
    if days is not None:
        result["period"] = app.metrics.get_metrics_for_period(app.owner, app.repo, days=days).model_dump()
    return result


def main(argv: list[str] | None = None) -> int:
    """Entry point: dispatch to daemon or a one-shot command."""
    args = parse_args(argv)

    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")
            logging.basicConfig(level=logging.INFO)
            logging.getLogger("pullpal").warning("config.yaml not found, using config.example.yaml")

    config = load_config(config_path)

    if args.check:
        print("Config OK:", config.bot.repository)
        return 0

    if args.subcommand != "daemon":
        try:
            result = _run_once(config, args.subcommand, args.days)
        except Exception as e:
            logging.getLogger("pullpal").exception("%s failed: %s", args.subcommand, e)
            return 1
        print(json.dumps(result, indent=2, default=str))
        return 0

    from pullpal.daemon import run_daemon

    try:
        run_daemon(config)
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logging.getLogger("pullpal.daemon").exception("Fatal error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
