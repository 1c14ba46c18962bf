from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema for the three tools (log writer, password
generator, job waiter) and translates the parsed namespace of the 'write'
command into sink configuration overrides.
"""

import argparse
from typing import Any, Dict

from opskit.domain.constants import APP_VERSION, FORMAT_LEGACY, FORMAT_STRUCTURED
from opskit.core.services.passwords import DEFAULT_LENGTH
from opskit.infra.network import API_ODATA, API_REST

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the opskit CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="opskit",
        description="Operations utilities: rotating log writer, password generator, job waiter.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate diagnostic verbosity to DEBUG.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    _add_write_parser(sub)
    _add_password_parser(sub)
    _add_wait_job_parser(sub)
    return p


def _add_write_parser(sub: Any) -> None:
    w = sub.add_parser("write", help="Append messages to a rotating log file.")
    w.add_argument("messages", nargs="+", help="One or more messages.")

    # --- Record Metadata ---
    w.add_argument(
        "-s", "--severity",
        type=int,
        choices=[0, 1, 2, 3],
        default=1,
        help="0 Success, 1 Info, 2 Warning, 3 Error.",
    )
    w.add_argument("--source", default=None, help="Component name written with each record.")
    w.add_argument(
        "--log-type",
        dest="log_format",
        choices=[FORMAT_STRUCTURED, FORMAT_LEGACY],
        default=None,
        help="Line encoding of the log file.",
    )

    # --- Target & Rotation ---
    w.add_argument("--dir", dest="directory", default=None, help="Log directory.")
    w.add_argument("--file", dest="file_name", default=None, help="Log file name.")
    w.add_argument(
        "--create-new",
        action="store_true",
        help="Archive an existing log file before the first write.",
    )
    w.add_argument("--max-history", type=int, default=None, help="Archived files to keep.")
    w.add_argument(
        "--max-size-mb",
        type=float,
        default=None,
        help="Rotate when the log exceeds this size (0 disables).",
    )

    # --- Output & Error Policy ---
    w.add_argument("--write-host", action="store_true", help="Mirror records to the console.")
    w.add_argument("--pass-thru", action="store_true", help="Print the messages back.")
    w.add_argument("--debug-message", action="store_true", help="Mark messages as debug.")
    w.add_argument("--log-debug", action="store_true", help="Write debug messages.")
    w.add_argument("--strict", action="store_true", help="Fail on filesystem errors.")
    w.add_argument(
        "--no-show-errors",
        action="store_true",
        help="Do not report suppressed filesystem errors.",
    )

    # --- Configuration Sources ---
    w.add_argument("--config", dest="config_file", default=None, help="JSON configuration file.")
    w.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration.",
    )
    w.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )


def _add_password_parser(sub: Any) -> None:
    pw = sub.add_parser("password", help="Generate random passwords.")
    pw.add_argument("-l", "--length", type=int, default=DEFAULT_LENGTH)
    pw.add_argument("-n", "--count", type=int, default=1)
    pw.add_argument("--no-upper", action="store_true")
    pw.add_argument("--no-lower", action="store_true")
    pw.add_argument("--no-digits", action="store_true")
    pw.add_argument("--no-special", action="store_true")
    pw.add_argument("--no-ambiguous", action="store_true", help="Exclude look-alike characters.")


def _add_wait_job_parser(sub: Any) -> None:
    j = sub.add_parser("wait-job", help="Wait for an orchestration job to finish.")
    j.add_argument("base_url", help="Server root URL.")
    j.add_argument("job_id", help="Job identifier.")
    j.add_argument("--api", choices=[API_ODATA, API_REST], default=API_REST)
    j.add_argument("--interval", type=float, default=5.0, help="Seconds between polls.")
    j.add_argument("--timeout", type=float, default=None, help="Maximum seconds to wait.")
    j.add_argument("--user", default=None)
    j.add_argument("--password", default=None)

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the 'write' namespace into sink configuration overrides.

    Only options the user actually supplied are returned, so persisted
    settings survive when a flag is omitted.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    for key in ("directory", "file_name", "log_format", "max_history"):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    if args.max_size_mb is not None:
        overrides["max_file_size_mb"] = args.max_size_mb
    if args.source:
        overrides["default_source"] = args.source

    if args.create_new:
        overrides["create_new_on_init"] = True
    if args.write_host:
        overrides["mirror_to_console"] = True
    if args.pass_thru:
        overrides["echo_input"] = True
    if args.log_debug:
        overrides["log_debug_messages"] = True
    if args.strict:
        overrides["suppress_errors"] = False
    if args.no_show_errors:
        overrides["show_errors"] = False

    return overrides
