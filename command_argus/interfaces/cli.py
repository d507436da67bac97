# command_argus/interfaces/cli.py
"""command-argus CLI - save, search and run named commands.

Thin front-end over CommandService. Each subcommand maps to one service
operation and returns a process exit code.
"""

import argparse
import logging
import shlex
import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from command_argus.config import platform_data_dir, settings
from command_argus.core.commands import (
    CommandArgusError,
    CommandRepository,
    CommandResponse,
    CommandService,
    CommandUpdate,
    CreateCommandRequest,
    EnvironmentVariableSchema,
)
from command_argus.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def _parse_pairs(pairs: list[str] | None, option: str) -> dict[str, str]:
    """Parse repeated KEY=VALUE options into an ordered dict."""
    result: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"{option} expects KEY=VALUE, got '{pair}'")
        result[key] = value
    return result


def _format_row(cmd: CommandResponse) -> str:
    full = " ".join([cmd.command, *cmd.args])
    tags = f" [{', '.join(cmd.tags)}]" if cmd.tags else ""
    return f"{cmd.id}  {cmd.name}: {full}{tags} (used {cmd.use_count}x)"


def _print_rows(commands: list[CommandResponse]) -> int:
    if not commands:
        print("No commands found.")
        return 0
    for cmd in commands:
        print(_format_row(cmd))
    return 0


def cmd_list(service: CommandService, args: argparse.Namespace) -> int:
    return _print_rows(service.list_commands())


def cmd_show(service: CommandService, args: argparse.Namespace) -> int:
    print(service.get_command(args.id).model_dump_json(indent=2))
    return 0


def cmd_add(service: CommandService, args: argparse.Namespace) -> int:
    env = _parse_pairs(args.env, "--env")
    request = CreateCommandRequest(
        name=args.name,
        command=args.command,
        args=list(args.args),
        description=args.description,
        working_directory=args.cwd,
        environment_variables=[
            EnvironmentVariableSchema(key=key, value=value) for key, value in env.items()
        ],
        tags=args.tag or [],
    )
    created = service.create_command(request)
    print(f"Created command '{created.name}' ({created.id})")
    if created.placeholders:
        print(f"Placeholders: {', '.join(created.placeholders)}")
    return 0


def cmd_edit(service: CommandService, args: argparse.Namespace) -> int:
    changes: dict = {}
    if args.name is not None:
        changes["name"] = args.name
    if args.command is not None:
        changes["command"] = args.command
    if args.args is not None:
        changes["args"] = shlex.split(args.args)
    if args.description is not None:
        changes["description"] = args.description or None
    if args.cwd is not None:
        changes["working_directory"] = args.cwd or None
    if args.env is not None:
        env = _parse_pairs(args.env, "--env")
        changes["environment_variables"] = [
            {"key": key, "value": value} for key, value in env.items()
        ]
    if args.tag is not None:
        changes["tags"] = args.tag

    updated = service.update_command(args.id, CommandUpdate(**changes))
    print(f"Updated command '{updated.name}' ({updated.id})")
    return 0


def cmd_rm(service: CommandService, args: argparse.Namespace) -> int:
    service.delete_command(args.id)
    print(f"Deleted command {args.id}")
    return 0


def cmd_search(service: CommandService, args: argparse.Namespace) -> int:
    return _print_rows(service.search_commands_by_name(args.query))


def cmd_tags(service: CommandService, args: argparse.Namespace) -> int:
    return _print_rows(service.search_commands_by_tags(args.tags))


def cmd_run(service: CommandService, args: argparse.Namespace) -> int:
    use_shell = settings.default_shell_mode
    if args.direct:
        use_shell = False
    elif args.shell:
        use_shell = True

    values = _parse_pairs(args.param, "--param")
    cmd = service.get_command(args.id)

    if values or cmd.placeholders or cmd.parameters:
        result = service.execute_command_with_parameters(cmd.id, values, use_shell)
    else:
        result = service.execute_command(cmd.id, use_shell)

    if result.stdout:
        sys.stdout.write(result.stdout)
    if result.stderr:
        sys.stderr.write(result.stderr)
    return result.exit_code if result.exit_code >= 0 else 1


def cmd_paths(service: CommandService, args: argparse.Namespace) -> int:
    print(f"Data directory: {settings.data_dir or platform_data_dir()}")
    print(f"Commands file: {service.repository.storage_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="command-argus",
        description="command-argus - save named commands and run them again",
    )
    parser.add_argument("--storage", help="Path to the commands JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    p = subparsers.add_parser("list", help="List all commands")
    p.set_defaults(handler=cmd_list)

    p = subparsers.add_parser("show", help="Show one command as JSON")
    p.add_argument("id")
    p.set_defaults(handler=cmd_show)

    p = subparsers.add_parser("add", help="Save a new command")
    p.add_argument("name")
    p.add_argument("command")
    p.add_argument(
        "args", nargs=argparse.REMAINDER, help="Arguments (put options before NAME)"
    )
    p.add_argument("--description")
    p.add_argument("--cwd", help="Working directory")
    p.add_argument("--env", action="append", metavar="KEY=VALUE")
    p.add_argument("--tag", action="append")
    p.set_defaults(handler=cmd_add)

    p = subparsers.add_parser("edit", help="Change fields of a saved command")
    p.add_argument("id")
    p.add_argument("--name")
    p.add_argument("--command")
    p.add_argument("--args", help="Replacement arguments as one shell-quoted string")
    p.add_argument("--description", help="Empty string clears it")
    p.add_argument("--cwd", help="Working directory, empty string clears it")
    p.add_argument("--env", action="append", metavar="KEY=VALUE")
    p.add_argument("--tag", action="append", help="Replaces all tags")
    p.set_defaults(handler=cmd_edit)

    p = subparsers.add_parser("rm", help="Delete a command")
    p.add_argument("id")
    p.set_defaults(handler=cmd_rm)

    p = subparsers.add_parser("search", help="Search commands by name")
    p.add_argument("query")
    p.set_defaults(handler=cmd_search)

    p = subparsers.add_parser("tags", help="Find commands with any of the tags")
    p.add_argument("tags", nargs="+")
    p.set_defaults(handler=cmd_tags)

    p = subparsers.add_parser("run", help="Run a saved command")
    p.add_argument("id")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--direct", action="store_true", help="Run without a shell")
    mode.add_argument("--shell", action="store_true", help="Run through the shell")
    p.add_argument("--param", action="append", metavar="NAME=VALUE")
    p.set_defaults(handler=cmd_run)

    p = subparsers.add_parser("paths", help="Show where commands are stored")
    p.set_defaults(handler=cmd_paths)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the command-argus command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        json_format=settings.log_json,
    )

    try:
        service = CommandService(CommandRepository(storage_path=args.storage))
        return args.handler(service, args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except CommandArgusError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 1


if __name__ == "__main__":
    sys.exit(main())
