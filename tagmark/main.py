"""
Main entry point for TagMark.

This module handles:
- Command line argument parsing
- Logging configuration
- Headless report mode
- Application initialization and exception handling
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Optional, List, TextIO

from tagmark import __version__
from tagmark.core.grammar import GrammarResolver
from tagmark.core.languages import language_for_file
from tagmark.core.scanner import TagScanContext
from tagmark.core.tags import TagRegistry
from tagmark.services.file_io import FileIOService
from tagmark.services.report import ReportRenderer
from tagmark.services.settings import HighlightSettings, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "TagMark"
APP_VERSION = __version__
APP_ORGANIZATION = "TagMark"

LOGS_DIR = Path.home() / ".tagmark" / "logs"


# =============================================================================
# Enums
# =============================================================================

class StartupMode(Enum):
    """Application startup mode."""
    VIEWER = auto()
    REPORT = auto()


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    paths: List[str] = field(default_factory=list)
    mode: StartupMode = StartupMode.VIEWER
    language: Optional[str] = None
    config_file: Optional[str] = None
    log_level: str = "INFO"
    debug: bool = False


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Logs go to stderr so report output on stdout stays clean.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    return root_logger


# =============================================================================
# Exception Handling
# =============================================================================

class ExceptionHandler:
    """
    Global exception handler for unhandled exceptions.

    Logs the exception and, once a QApplication is running, shows an
    error dialog.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._gui = False

    def enable_dialogs(self) -> None:
        self._gui = True

    def handle_exception(self, exc_type: type, exc_value: BaseException, exc_tb) -> None:
        """Handle an unhandled exception."""
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return

        self.logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))

        if self._gui:
            tb_text = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
            self._show_error_dialog(exc_type, exc_value, tb_text)

    def _show_error_dialog(self, exc_type: type, exc_value: BaseException, traceback_text: str) -> None:
        from PyQt6.QtWidgets import QApplication, QMessageBox

        if QApplication.instance() is None:
            return

        dialog = QMessageBox()
        dialog.setIcon(QMessageBox.Icon.Critical)
        dialog.setWindowTitle("Application Error")
        dialog.setText(f"An unexpected error occurred:\n\n{exc_type.__name__}: {exc_value}")
        dialog.setDetailedText(traceback_text)
        dialog.setStandardButtons(QMessageBox.StandardButton.Ok)
        dialog.exec()


# =============================================================================
# Command Line Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME.lower(),
        description="Highlight TODO, FIXME and other tagged comments in source files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s main.c                        Open a file in the viewer
  %(prog)s --report src/*.py             Print tagged comments
  %(prog)s --report -l plaintext notes   Force a language
        """
    )

    parser.add_argument('paths', nargs='*', help='Files to open or report on')
    parser.add_argument(
        '-r', '--report',
        action='store_true',
        help='Print tagged comments instead of opening the viewer'
    )
    parser.add_argument(
        '-l', '--language',
        help='Language identifier (detected from the file name by default)'
    )
    parser.add_argument('-c', '--config', help='Settings file path')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='WARNING',
        help='Log level'
    )
    parser.add_argument('--version', action='version', version=f'{APP_NAME} {APP_VERSION}')

    parsed = parser.parse_args(args)

    result = CommandLineArgs()
    result.paths = list(parsed.paths)
    result.mode = StartupMode.REPORT if parsed.report else StartupMode.VIEWER
    result.language = parsed.language
    result.config_file = parsed.config
    result.debug = parsed.debug

    if parsed.debug or parsed.verbose:
        result.log_level = 'DEBUG'
    else:
        result.log_level = parsed.log_level

    return result


def load_settings(args: CommandLineArgs) -> SettingsManager:
    path = Path(args.config_file) if args.config_file else None
    return SettingsManager(path)


# =============================================================================
# Report Mode
# =============================================================================

def run_report(
    paths: List[str],
    settings: HighlightSettings,
    language: Optional[str] = None,
    out: Optional[TextIO] = None
) -> int:
    """
    Print every tagged comment in the given files.

    Returns:
        Exit code: 0 if all files were read, 1 otherwise
    """
    out = out or sys.stdout
    renderer = ReportRenderer()
    resolver = GrammarResolver(settings, TagRegistry(settings.tags, renderer.create_style))
    context = TagScanContext(resolver, renderer)
    file_io = FileIOService()
    exit_code = 0

    for path in paths:
        result = file_io.read_source(path)
        if not result.success:
            logging.error(f"Report - Skipping {path}: {result.error}")
            exit_code = 1
            continue

        grammar = context.set_language(language or language_for_file(path))
        if not grammar.supported:
            logging.info(f"Report - No comment grammar for {path} ({grammar.language_id})")
            continue

        renderer.hits.clear()
        renderer.begin(result.content)
        context.update(result.content)

        for hit in renderer.sorted_hits():
            print(hit.format(str(path)), file=out)

    return exit_code


# =============================================================================
# Viewer Mode
# =============================================================================

def run_viewer(args: CommandLineArgs, settings_manager: SettingsManager,
               exception_handler: ExceptionHandler) -> int:
    from PyQt6.QtWidgets import QApplication
    from tagmark.ui.main_window import MainWindow

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setOrganizationName(APP_ORGANIZATION)
    exception_handler.enable_dialogs()

    window = MainWindow(settings_manager)
    if args.paths:
        window.open_file(args.paths[0], args.language)
    window.show()

    logging.info("Application started successfully")
    return app.exec()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code (0 for success)
    """
    args = parse_arguments(argv)

    log_file = LOGS_DIR / f"{APP_NAME}_{datetime.now():%Y%m%d}.log" if args.debug else None
    logger = setup_logging(args.log_level, log_file)
    logger.debug(f"Starting {APP_NAME} v{APP_VERSION}")

    exception_handler = ExceptionHandler(logger)
    sys.excepthook = exception_handler.handle_exception

    settings_manager = load_settings(args)

    if args.mode == StartupMode.REPORT:
        if not args.paths:
            logger.error("Report mode needs at least one file")
            return 2
        return run_report(args.paths, settings_manager.settings, args.language)

    return run_viewer(args, settings_manager, exception_handler)


if __name__ == '__main__':
    sys.exit(main())
