"""
lazy-clockify
- `new`: log one Clockify time entry for today (or --date), describing it with
  the ticket number found in the current git branch.
- `setup`: choose a workspace and project once and store their ids.

Settings come from config.ini ([clockify] section), environment variables
and flags, in increasing priority.
"""

import argparse
import sys
from typing import List, Optional

import urllib3

from .clockify import ClockifyClient, make_session
from .config import DEFAULT_END, DEFAULT_START, build_settings, default_config_path, read_config
from .errors import LazyClockifyError
from .workflow import EntryWorkflow, SetupWorkflow, vprint


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for both actions.

    Returns:
        argparse.Namespace: options; ``command`` is 'new' or 'setup'.
    """
    default_cfg = default_config_path()

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=default_cfg, help=f"Path to config.ini (default: {default_cfg})")
    common.add_argument("--api-key", dest="api_key", default=None, help="Clockify API key (overrides config)")
    common.add_argument("--verbose", action="store_true", help="Print diagnostic details")
    common.add_argument("--timeout", type=int, default=10, help="Per-request timeout in seconds (default=10)")
    common.add_argument("--insecure", action="store_true", help="DISABLE SSL verification (NOT RECOMMENDED)")

    p = argparse.ArgumentParser(prog="lazy-clockify", description="Log Clockify time entries from the terminal.")
    sub = p.add_subparsers(dest="command", required=True)

    new = sub.add_parser("new", parents=[common], help="Create a new time entry")
    new.add_argument("--start-time", dest="start_time", default=None, help=f"Start time H:MM (default {DEFAULT_START})")
    new.add_argument("--end-time", dest="end_time", default=None, help=f"End time H:MM (default {DEFAULT_END})")
    new.add_argument("--date", default=None, help="Entry date YYYY-MM-DD (default today)")
    new.add_argument("-m", "--message", default=None, help="Description; skips the git ticket lookup")
    new.add_argument("--ticket-prefix", dest="ticket_prefix", default=None,
                     help="Prefix for git branch ticket numbers (e.g. EL for EL-1234)")
    new.add_argument("--project", type=int, default=None, help="1-based project number from the project list")
    new.add_argument("-y", "--yes", action="store_true", help="Skip all prompts and the confirmation")

    sub.add_parser("setup", parents=[common], help="Choose and save default workspace and project")
    return p.parse_args(argv)


def make_client(settings) -> ClockifyClient:
    if not settings.verify_ssl and not settings.ca_bundle:
        sys.stderr.write("WARNING: SSL certificate verification is DISABLED. Use only for testing.\n")
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    session = make_session(settings.api_key, verify=settings.verify_ssl, ca_bundle=settings.ca_bundle,
                           http_proxy=settings.http_proxy, https_proxy=settings.https_proxy)
    return ClockifyClient(session, timeout=settings.timeout)


def run(args: argparse.Namespace) -> int:
    cfg = read_config(args.config)
    settings = build_settings(args, cfg)
    vprint(settings.verbose, f"Config file: {args.config}")
    client = make_client(settings)
    if args.command == "setup":
        SetupWorkflow(client, args.config).run()
        return 0
    EntryWorkflow(settings, client).run()
    return 0


def main(argv: Optional[List[str]] = None):
    """Program entry point; turns failures into one stderr line and an exit code."""
    args = parse_args(argv)
    try:
        code = run(args)
    except LazyClockifyError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        sys.exit(130)
    sys.exit(code)


if __name__ == "__main__":
    main()
