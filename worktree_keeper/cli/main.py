"""Command-line interface for worktree-keeper"""

import sys
from typing import List, Optional

from rich.console import Console

from worktree_keeper.cli.args import parse_args
from worktree_keeper.config import Config
from worktree_keeper.core.work_keeper import WorkKeeper
from worktree_keeper.exceptions import NotRegisteredProjectError
from worktree_keeper.logging_config import get_logger, setup_logging
from worktree_keeper.shell import shell_init
from worktree_keeper.utils.threading import get_optimal_worker_count, is_free_threading_enabled

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def dispatch(keeper: WorkKeeper, command: Optional[str], argument: Optional[str]) -> int:
    """Run one `work` command. Returns the exit code."""
    if command is None:
        keeper.navigate()
    elif command == "ls":
        keeper.list_worktrees()
    elif command == "rm":
        result = keeper.remove(argument)
        if result.cancelled:
            return EXIT_OK
    elif command == "prune":
        keeper.prune()
    elif command == "add":
        keeper.add_project(argument)
    else:
        keeper.open_branch(command)
    return EXIT_OK


def main(argv: Optional[List[str]] = None, keeper: Optional[WorkKeeper] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)

    if parsed_args.shell_init:
        sys.stdout.write(shell_init(parsed_args.shell_init))
        return EXIT_OK

    try:
        if keeper is None:
            config = Config.load(
                overrides={
                    "verbose": parsed_args.verbose or None,
                    "debug": parsed_args.debug or None,
                }
            )
            setup_logging(
                verbose=config.verbose,
                debug=config.debug,
                log_file=config.log_file,
            )
            keeper = WorkKeeper(config)
        else:
            config = keeper.config
            setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        if parsed_args.debug:
            err_console.print("[yellow]Debug mode enabled[/yellow]")
            err_console.print(
                f"  Free-threading enabled: {is_free_threading_enabled()}, "
                f"lookup workers: {get_optimal_worker_count(config.workers)}"
            )
            err_console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                if key == "github_token" and value:
                    value = "***"
                err_console.print(f"  {key}: {value}")

        try:
            code = dispatch(keeper, parsed_args.command, parsed_args.argument)
            target = keeper.finish()
            if target and not keeper.location.cd_file:
                console.print(f"cd {target}", markup=False, highlight=False, soft_wrap=True)
            return code
        finally:
            keeper.close()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return EXIT_INTERRUPTED
    except NotRegisteredProjectError as e:
        err_console.print(f"[red]{e}[/red]")
        err_console.print("Use [cyan]work add[/cyan] to register the current repository")
        return EXIT_FAILURE
    except Exception as e:
        err_console.print(f"[red]Error: {e}[/red]")
        if parsed_args.debug:
            err_console.print_exception()
        return EXIT_FAILURE


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
