# hrmon/cli/main.py
from __future__ import annotations

from typing import Optional

from hrmon.core.errors import MonitorError

from hrmon.cli.args import parse_args
from hrmon.cli.commands import cmd_convert, cmd_run, cmd_url


def main(argv: Optional[list[str]] = None) -> int:
    try:
        args = parse_args(argv)

        if args.cmd == "convert":
            return cmd_convert(args)
        if args.cmd == "url":
            return cmd_url(args)
        if args.cmd == "run":
            return cmd_run(args)

        return 2
    except MonitorError as e:
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
