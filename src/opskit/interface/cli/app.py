from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: diagnostic logging bootstrap, configuration
resolution (defaults, persisted JSON, CLI overrides) and dispatch to the log
writer, password generator or job waiter.
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from opskit.core.logsink.sink import RotatingLogSink
from opskit.core.services.passwords import generate_password
from opskit.core.services.validator import sink_config_to_dict, validate_sink_config
from opskit.domain.config import get_default_config, load_config
from opskit.domain.errors import InvalidRecordError, LogWriterError
from opskit.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_diagnostics_path,
    get_logger,
)
from opskit.infra.network import JobPollError, JobTimeoutError, wait_for_job
from opskit.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_JOB_TIMEOUT = 3

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Diagnostics bootstrap (stderr, plus a persistent file in debug mode)
    if args.debug:
        configure_logging(LoggingConfig(
            level="DEBUG",
            console=True,
            log_file=get_default_diagnostics_path(),
        ))
    else:
        configure_logging(LoggingConfig(level="WARNING", console=True))
    logger.debug(f"CLI command '{args.command}' initiated.")

    handlers = {
        "write": _run_write,
        "password": _run_password,
        "wait-job": _run_wait_job,
    }
    try:
        return handlers[args.command](args)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _run_write(args: argparse.Namespace) -> int:
    """Resolve the sink configuration and write the messages."""
    if args.config_file:
        base_conf = load_config(args.config_file)
    elif args.use_defaults:
        base_conf = get_default_config()
    else:
        base_conf = load_config()

    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))

    try:
        cfg, warnings = validate_sink_config(raw_conf, strict=False)
    except (TypeError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(sink_config_to_dict(cfg), ensure_ascii=False, indent=2))
        return EXIT_OK

    sink = RotatingLogSink(cfg)
    try:
        echoed = sink.write(
            args.messages,
            args.severity,
            args.source,
            debug=args.debug_message,
        )
    except InvalidRecordError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE
    except LogWriterError as e:
        logger.error(f"Log write failed: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    for message in echoed or []:
        print(message)
    return EXIT_OK


def _run_password(args: argparse.Namespace) -> int:
    """Print one or more generated passwords."""
    if args.count < 1:
        print("ERROR: --count must be at least 1.", file=sys.stderr)
        return EXIT_USAGE
    try:
        for _ in range(args.count):
            print(generate_password(
                args.length,
                use_upper=not args.no_upper,
                use_lower=not args.no_lower,
                use_digits=not args.no_digits,
                use_special=not args.no_special,
                exclude_ambiguous=args.no_ambiguous,
            ))
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE
    return EXIT_OK


def _run_wait_job(args: argparse.Namespace) -> int:
    """Poll a job and print its terminal status."""
    auth = (args.user, args.password or "") if args.user else None
    try:
        status = wait_for_job(
            args.base_url,
            args.job_id,
            api=args.api,
            interval=args.interval,
            timeout=args.timeout,
            auth=auth,
        )
    except JobTimeoutError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_JOB_TIMEOUT
    except JobPollError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(status)
    return EXIT_OK if status == "Completed" else EXIT_FAILURE

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of override values into the base configuration.

    Only keys known to the default schema are merged.
    """
    out = dict(base)
    for k in get_default_config():
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out
