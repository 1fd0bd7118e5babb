import argparse
import logging
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tallyterm import __version__
from tallyterm.app import DEFAULT_FRAME_RATE, DEFAULT_TICK_RATE, App
from tallyterm.config import Config, ConfigError, load_config
from tallyterm.keys import sequence_to_string
from tallyterm.logs import init_logging

logger = logging.getLogger(__name__)


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tallyterm",
        description="Async counter demo for the terminal",
    )
    parser.add_argument("-t", "--tick-rate", type=_positive_float, default=DEFAULT_TICK_RATE,
                        help="ticks per second (default: %(default)s)")
    parser.add_argument("-f", "--frame-rate", type=_positive_float, default=DEFAULT_FRAME_RATE,
                        help="frames per second (default: %(default)s)")
    parser.add_argument("-c", "--config", metavar="PATH",
                        help="config file (default: $TALLYTERM_CONFIG/config.json)")
    parser.add_argument("--keys", action="store_true",
                        help="print the effective key bindings and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def print_keybindings(config: Config, console: Console):
    table = Table(title="Key Bindings")
    table.add_column("Section", style="bold")
    table.add_column("Key", style="cyan")
    table.add_column("Action", style="yellow")
    for section, keymap in config.keybindings.items():
        for seq, action in keymap.items():
            table.add_row(section, escape(sequence_to_string(seq)), str(action))
    console.print(table)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    err = Console(stderr=True)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        err.print(f"[bold red]config error:[/] {escape(str(e))}")
        return 1

    if args.keys:
        print_keybindings(config, Console())
        return 0

    log_path = init_logging(config.data_dir)
    logger.info("starting tallyterm %s (tick_rate=%s, frame_rate=%s)", __version__, args.tick_rate, args.frame_rate)

    app = App(config, tick_rate=args.tick_rate, frame_rate=args.frame_rate)
    try:
        status = app.run()
    except Exception:
        logger.exception("tallyterm crashed")
        err.print_exception()
        err.print(f"[dim]log: {escape(log_path)}[/]")
        return 1

    if app.error:
        err.print(f"[bold red]error:[/] {escape(app.error)}")
    return status


if __name__ == "__main__":
    sys.exit(main())
