"""CLI entry point for pi-watch. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from pi.watch import __version__
from pi.watch.config import DEFAULT_INTERVAL, WatchConfig, load_env_settings
from pi.watch.errors import (
    EXIT_FAILURE,
    EXIT_OK,
    Terminated,
    UsageError,
    WatchError,
)

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    # Everything from the first non-option on belongs to the command.
    "allow_interspersed_args": False,
}


def normalize_args(args: list[str]) -> list[str]:
    """Rewrite ``--differences=X`` / ``-dX`` into ``--differences --cumulative``.

    ``--differences`` takes an *attached* optional value, so ``-d ls`` must
    still mean "highlight changes in ls".  Click cannot express that, so the
    option words in front of the command are rewritten before parsing.
    """
    result: list[str] = []
    index = 0
    while index < len(args):
        arg = args[index]
        if arg in ("-", "--") or not arg.startswith("-"):
            result.extend(args[index:])
            break

        if arg.startswith("--"):
            if arg.startswith("--differences="):
                result += ["--differences", "--cumulative"]
            else:
                result.append(arg)
                if arg == "--interval" and index + 1 < len(args):
                    index += 1
                    result.append(args[index])
            index += 1
            continue

        # Short option cluster such as -tn5 or -dcumulative.
        cluster = arg[1:]
        for pos, letter in enumerate(cluster):
            rest = cluster[pos + 1 :]
            if letter == "d":
                result.append("-d")
                if rest:
                    result.append("--cumulative")
                break
            if letter == "n":
                result.append("-n")
                if rest:
                    result.append(rest)
                elif index + 1 < len(args):
                    index += 1
                    result.append(args[index])
                break
            result.append(f"-{letter}")
        index += 1
    return result


def _configure_logging() -> None:
    settings = load_env_settings()
    if not settings.log_path:
        return
    logging.basicConfig(
        filename=settings.log_path,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-d",
    "--differences",
    is_flag=True,
    help="Highlight changes between updates (--differences=cumulative keeps them).",
)
@click.option("--cumulative", is_flag=True, hidden=True)
@click.option(
    "-n",
    "--interval",
    type=float,
    default=DEFAULT_INTERVAL,
    show_default=True,
    metavar="SECONDS",
    help="Seconds to wait between updates.",
)
@click.option("-t", "--no-title", is_flag=True, help="Turn off the header.")
@click.option("-p", "--paging", is_flag=True, help="Scroll with arrows, PgUp/PgDn, g and G.")
@click.version_option(__version__, "-v", "--version", prog_name="pi-watch")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
def watch(
    differences: bool,
    cumulative: bool,
    interval: float,
    no_title: bool,
    paging: bool,
    command: tuple[str, ...],
) -> None:
    """Execute COMMAND repeatedly, displaying its output fullscreen."""
    from pi.watch.engine import WatchEngine
    from pi.watch.terminal import ProcessTerminal

    settings = load_env_settings()
    config = WatchConfig.create(
        command,
        interval=interval,
        differences=differences,
        cumulative=cumulative,
        show_title=not no_title,
        paging=paging,
        force_8bit=settings.force_8bit,
    )
    logger.info("watching %r every %.1fs", config.command, config.interval)

    terminal = ProcessTerminal(write_log_path=settings.write_log_path)
    WatchEngine(config, terminal).run()


def main(argv: list[str] | None = None) -> None:
    """Run the CLI and exit with the code matching how the loop ended."""
    _configure_logging()
    args = normalize_args(list(sys.argv[1:] if argv is None else argv))

    try:
        code = watch.main(args=args, prog_name="pi-watch", standalone_mode=False)
    except click.UsageError as exc:
        exc.show()
        sys.exit(EXIT_FAILURE)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(EXIT_FAILURE)
    except UsageError as exc:
        click.echo(f"pi-watch: {exc}", err=True)
        click.echo(watch.get_usage(click.Context(watch, info_name="pi-watch")), err=True)
        sys.exit(exc.exit_code)
    except Terminated as exc:
        sys.exit(exc.exit_code)
    except WatchError as exc:
        logger.error("%s", exc)
        click.echo(f"pi-watch: {exc}", err=True)
        sys.exit(exc.exit_code)

    sys.exit(code if isinstance(code, int) else EXIT_OK)


if __name__ == "__main__":
    main()
