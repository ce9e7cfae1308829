"""errtree command-line interface entrypoint."""

from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence
from types import ModuleType

from errtree.cli.commands import demo

CommandModule = ModuleType
CommandRunner = Callable[[argparse.Namespace], int]

# Map CLI subcommands to their implementation modules.
_COMMANDS: dict[str, CommandModule] = {
    "demo": demo,
}


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="errtree",
        description="errtree - indented diagnostic traces for chained and aggregated failures",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="<command>")

    for name, module in _COMMANDS.items():
        add_subparser = getattr(module, "add_subparser", None)
        if add_subparser is None:
            raise RuntimeError(f"CLI command module '{name}' is missing add_subparser().")
        add_subparser(subparsers)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse args, dispatch to the selected command and return its exit code."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    command_name = str(args.command)

    module = _COMMANDS.get(command_name)
    if module is None:
        raise RuntimeError(f"Unknown command: {command_name}")

    runner: CommandRunner | None = getattr(module, "run", None)
    if runner is None:
        raise RuntimeError(f"CLI command module '{command_name}' is missing run().")
    return int(runner(args))


def app() -> None:
    """Console script entrypoint."""
    raise SystemExit(main())


if __name__ == "__main__":
    app()
