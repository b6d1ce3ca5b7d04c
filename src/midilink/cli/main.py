"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from midilink import __version__
from midilink.exceptions import ConfigurationError
from midilink.models import AppConfig

from .commands import config, devices_group, monitor, send

logger = logging.getLogger(__name__)


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging
        log_file: Custom log file path (optional)
        log_level: Log level used when neither --debug nor -v is given
            (DEBUG/INFO/WARNING/ERROR)

    Returns:
        Path of the log file
    """
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, log_level.upper())

    if debug and not log_file:
        log_path = Path.cwd() / "midilink-debug.log"
    elif log_file:
        log_path = log_file
    else:
        log_dir = Path.home() / ".midilink" / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / "midilink.log"

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Keeps last 5 files, max 10MB each
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group()
@click.version_option(version=__version__, prog_name="midilink")
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./midilink-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default=None,
    help='Log level for file logging (default: log_level from config)'
)
def cli(verbose: int, debug: bool, log_file: Optional[Path], log_level: Optional[str]):
    """
    midilink - connect to MIDI devices and route their messages.

    \b
    Examples:
      # List MIDI devices
      midilink devices list

      # Watch a device, routing channel 1 and CC 7 on channel 1
      midilink monitor "TestSynth" --channel 1 --cc 1:7

      # Send a note on
      midilink send "TestSynth" --channel "90 3C 40"

      # Enable debug logging
      midilink --debug devices list
    """
    config_error = None
    if log_level is None:
        try:
            log_level = AppConfig.load_or_default().log_level
        except ConfigurationError as e:
            # Reported once logging is up; `config show` still needs to run
            config_error = e
            log_level = "INFO"

    setup_logging(verbose, debug, log_file, log_level)

    if config_error is not None:
        logger.warning(f"Ignoring unreadable config: {config_error.technical_message}")


cli.add_command(devices_group)
cli.add_command(monitor)
cli.add_command(send)
cli.add_command(config)

if __name__ == "__main__":
    cli()
