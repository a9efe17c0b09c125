# fsconsole/cli/args.py
from __future__ import annotations

import argparse
from typing import Optional


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fsconsole")
    parser.add_argument("--config", default=None, help="YAML config file (see ConsoleConfig keys).")
    parser.add_argument("--api-url", default=None, help="Backend API base URL.")
    parser.add_argument("--ws-url", default=None, help="Live log stream URL.")
    parser.add_argument("--log-file", default=None, help="Append application logs to this file.")

    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("commands", help="List known commands.")

    p_describe = sub.add_parser("describe", help="Show parameters of one command.")
    p_describe.add_argument("name")

    p_check = sub.add_parser("check", help="Validate a command line without executing it.")
    p_check.add_argument("line", nargs=argparse.REMAINDER)

    p_exec = sub.add_parser("exec", help="Validate and execute one command line.")
    p_exec.add_argument("line", nargs=argparse.REMAINDER)

    p_run = sub.add_parser("run", help="Execute a .smia script.")
    p_run.add_argument("script")
    p_run.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Pause between dispatched commands (default from config: 500).",
    )

    sub.add_parser("sample-script", help="Print a sample .smia script.")
    sub.add_parser("health", help="Check backend health.")

    p_logs = sub.add_parser("logs", help="Follow the live log stream.")
    p_logs.add_argument("--secs", type=float, default=None, help="Stop after N seconds (default: until Ctrl+C).")

    p_shell = sub.add_parser("shell", help="Interactive command shell.")
    p_shell.add_argument("--stream", action="store_true", help="Buffer live stream logs while the shell runs.")

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    # `-param` words after the command name belong to the command line, not to
    # argparse (REMAINDER). Quoting survives only if protected from the shell.
    if hasattr(args, "line"):
        args.line = " ".join(args.line)
    return args
