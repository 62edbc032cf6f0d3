# techsteps/cli.py
"""
Discovery command line.

Usage:
    techsteps-discover                  one cycle, then exit
    techsteps-discover --continuous     cycle, sleep an hour, repeat
    techsteps-discover --continuous --interval 600 --batch-size 1
"""

from __future__ import annotations

from typing import List, Optional
import argparse
import logging
import sys

from techsteps.core.settings import get_settings
from techsteps.services.discovery import build_orchestrator

log = logging.getLogger("techsteps.cli")


def _parser(default_interval: float) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="techsteps-discover",
        description="Search the web for fixes and queue draft guides for review.",
    )
    p.add_argument("--continuous", action="store_true", help="Keep running, one cycle per interval")
    p.add_argument(
        "--interval",
        type=float,
        default=default_interval,
        help=f"Seconds between cycles in continuous mode (default {default_interval:.0f})",
    )
    p.add_argument("--batch-size", type=int, default=None, help="Queries per cycle")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    cfg = get_settings()
    args = _parser(cfg.continuous_interval_seconds).parse_args(argv)

    logging.basicConfig(
        level=(args.log_level or cfg.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.batch_size is not None:
        cfg = cfg.model_copy(update={"batch_size": max(1, args.batch_size)})

    log.info(
        "keys: mistral=%s tavily=%s batch_size=%d",
        bool(cfg.mistral_api_key),
        bool(cfg.tavily_api_key),
        cfg.batch_size,
    )

    orch = build_orchestrator(cfg)
    try:
        if args.continuous:
            orch.run_forever(args.interval)
        else:
            orch.run_cycle()
    except KeyboardInterrupt:
        log.info("stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
