# fsconsole/cli/main.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from fsconsole.core.errors import FsConsoleError

from fsconsole.cli.args import parse_args
from fsconsole.cli.commands import (
    build_session,
    cmd_check,
    cmd_commands,
    cmd_describe,
    cmd_exec,
    cmd_health,
    cmd_logs,
    cmd_run,
    cmd_sample_script,
    cmd_shell,
    configure_file_logging,
    resolve_config,
)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    try:
        if args.log_file:
            configure_file_logging(Path(args.log_file))

        if args.cmd == "sample-script":
            return cmd_sample_script()

        with build_session(resolve_config(args)) as session:
            if args.cmd == "commands":
                return cmd_commands(session)
            if args.cmd == "describe":
                return cmd_describe(session, args.name)
            if args.cmd == "check":
                return cmd_check(session, args.line)
            if args.cmd == "exec":
                return cmd_exec(session, args.line)
            if args.cmd == "run":
                return cmd_run(session, args.script)
            if args.cmd == "health":
                return cmd_health(session)
            if args.cmd == "logs":
                return cmd_logs(session, secs=args.secs)
            if args.cmd == "shell":
                return cmd_shell(session, stream=args.stream)

        return 2
    except FsConsoleError as e:
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
