from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from check_apt import __version__
from check_apt.checks import check_update, check_upgrade
from check_apt.config import DEFAULT_TIMEOUT, ConfigError, RunConfig, load_run_config
from check_apt.report import STDERR_NOTICE, format_summary, internal_error_message, timeout_message
from check_apt.runner import Deadline
from check_apt.status import CheckResult, State, Summary, summarize

log = logging.getLogger("check_apt.plugin")

DESCRIPTION = (
    "This plugin checks for software updates on systems that use package management "
    "systems based on the apt-get(8) command found in Debian GNU/Linux."
)
EPILOG = (
    "The following options require root privileges and should be used with care: "
    "-u/--update (you may also need to raise -t)."
)


class PluginTimeout(Exception):
    def __init__(self, seconds: int):
        super().__init__(f"timeout after {seconds}s")
        self.seconds = seconds


class _PluginArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(int(State.UNKNOWN), f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _PluginArgumentParser(prog="check_apt", description=DESCRIPTION, epilog=EPILOG)
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s v{__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="show details for command-line debugging")
    parser.add_argument(
        "-t",
        "--timeout",
        type=int,
        default=None,
        metavar="SECONDS",
        help=f"seconds before the plugin times out (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "-u",
        "--update",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="first perform an 'apt-get update' (--no-update overrides the config file)",
    )
    parser.add_argument(
        "-d",
        "--dist-upgrade",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="perform a dist-upgrade instead of normal upgrade (--no-dist-upgrade overrides the config file)",
    )
    parser.add_argument("-c", "--config", default=None, help="YAML config file")
    return parser


def _configure_logging(log_file: Path | None, verbose: int) -> None:
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose >= 3 else logging.INFO)
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        h_file = logging.FileHandler(log_file, encoding="utf-8")
        h_file.setFormatter(fmt)
        root_logger.addHandler(h_file)

    # stdout belongs to the plugin output
    if verbose >= 2:
        h_err = logging.StreamHandler(sys.stderr)
        h_err.setFormatter(fmt)
        root_logger.addHandler(h_err)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())


def _ensure_time(deadline: Deadline, cfg: RunConfig) -> None:
    if deadline.expired:
        log.error("run_timeout timeout_s=%d", cfg.timeout)
        raise PluginTimeout(cfg.timeout)


def run(cfg: RunConfig, deadline: Deadline | None = None) -> Summary:
    deadline = deadline or Deadline(cfg.timeout)
    results: list[CheckResult] = []

    if cfg.update:
        results.append(check_update(deadline, cfg.verbose))
        _ensure_time(deadline, cfg)

    results.append(check_upgrade(deadline, cfg.verbose, dist_upgrade=cfg.dist_upgrade))
    _ensure_time(deadline, cfg)

    for r in results:
        log.info("check_done check=%s state=%s details=%s", r.name, r.state.text, r.details)
    summary = summarize(results, dist_upgrade=cfg.dist_upgrade)
    log.info(
        "run_done state=%s pending=%d stderr_warning=%s exec_warning=%s",
        summary.state.text,
        summary.packages,
        summary.stderr_warning,
        summary.exec_warning,
    )
    return summary


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = load_run_config(args)
    except ConfigError as e:
        parser.error(str(e))

    try:
        _configure_logging(cfg.log_file, cfg.verbose)
        log.info(
            "run_start timeout_s=%d update=%s dist_upgrade=%s verbose=%d",
            cfg.timeout,
            cfg.update,
            cfg.dist_upgrade,
            cfg.verbose,
        )
        summary = run(cfg)
    except PluginTimeout as e:
        print(timeout_message(e.seconds))
        return int(State.UNKNOWN)
    except Exception as e:
        log.exception("run_error %s", e)
        print(internal_error_message(e))
        return int(State.UNKNOWN)

    if summary.stderr_warning:
        print(STDERR_NOTICE, file=sys.stderr)
    print(format_summary(summary))
    return int(summary.state)


if __name__ == "__main__":
    raise SystemExit(main())
