"""
Main entry point for the Code Explainer application.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings and secrets loading
- Theme setup
- Main window creation
- Headless (terminal) mode
- Exception handling
"""

from __future__ import annotations

import argparse
import faulthandler
import logging
import os
import signal
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Optional, List, TextIO

from code_explainer import __version__
from code_explainer.services.settings import (
    ApplicationSettings,
    SettingsManager,
    Theme,
    load_api_key,
)


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "CodeExplainer"
APP_DISPLAY_NAME = "Code Explainer"
APP_VERSION = __version__
APP_ORGANIZATION = "CodeExplainer"

# Paths
if getattr(sys, 'frozen', False):
    # Running as compiled executable
    APP_DIR = Path(sys.executable).parent
else:
    # Running as script
    APP_DIR = Path(__file__).parent

LOGS_DIR = APP_DIR / "logs"


# =============================================================================
# Enums
# =============================================================================

class StartupMode(Enum):
    """Application startup mode."""
    GUI = auto()
    IMAGE = auto()       # Explain an image file in the terminal
    CAMERA = auto()      # Explain a camera frame in the terminal
    TEXT = auto()        # Highlight a text file in the terminal


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    mode: StartupMode = StartupMode.GUI
    image_path: Optional[str] = None
    text_path: Optional[str] = None
    explain: bool = True
    scheme: Optional[str] = None
    carry_block_comments: bool = False
    theme: Optional[Theme] = None
    config_file: Optional[str] = None
    env_file: Optional[str] = None
    log_level: str = "INFO"
    reset_settings: bool = False
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

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        stream = stream or sys.stdout
        self.use_colors = use_colors and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Configure application logging.

    Args:
        level: Log level string
        log_file: Optional file path for logging
        stream: Console stream (stdout by default)

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    stream = stream or sys.stdout

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True, stream=stream))
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(
            log_file,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    for name in ('PIL', 'urllib3', 'httpx', 'httpcore', 'google_genai'):
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


# =============================================================================
# Exception Handling
# =============================================================================

class ExceptionHandler:
    """
    Global exception handler for unhandled exceptions.

    Logs the exception and, once the GUI is running, shows an error dialog.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._gui_enabled = False

    def enable_dialogs(self) -> None:
        """Show error dialogs for unhandled exceptions."""
        self._gui_enabled = True

    def handle_exception(
        self,
        exc_type: type,
        exc_value: BaseException,
        exc_tb
    ) -> None:
        """Handle an unhandled exception."""
        # Don't handle keyboard interrupt
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return

        self.logger.critical(
            "Unhandled exception",
            exc_info=(exc_type, exc_value, exc_tb)
        )

        if self._gui_enabled:
            tb_text = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
            self._show_error_dialog(exc_type, exc_value, tb_text)

    def _show_error_dialog(
        self,
        exc_type: type,
        exc_value: BaseException,
        traceback_text: str
    ) -> None:
        """Show error dialog to user."""
        from PyQt6.QtWidgets import QApplication, QMessageBox

        if QApplication.instance() is None:
            return

        dialog = QMessageBox()
        dialog.setIcon(QMessageBox.Icon.Critical)
        dialog.setWindowTitle("Application Error")
        dialog.setText(f"An unexpected error occurred:\n\n{exc_type.__name__}: {exc_value}")
        dialog.setDetailedText(traceback_text)
        dialog.setStandardButtons(
            QMessageBox.StandardButton.Ok |
            QMessageBox.StandardButton.Close
        )
        dialog.setDefaultButton(QMessageBox.StandardButton.Ok)

        copy_btn = dialog.addButton(
            "Copy to Clipboard",
            QMessageBox.ButtonRole.ActionRole
        )

        result = dialog.exec()

        if dialog.clickedButton() == copy_btn:
            QApplication.clipboard().setText(traceback_text)

        if result == QMessageBox.StandardButton.Close:
            QApplication.quit()


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
        prog="code-explainer",
        description="Recognize code in an image, explain it and show it highlighted",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              Start the GUI
  %(prog)s --image snippet.png          Explain an image in the terminal
  %(prog)s --camera --no-explain        Recognize a camera frame only
  %(prog)s --text main.dart             Highlight a text file
        """
    )

    # Headless sources
    source_group = parser.add_mutually_exclusive_group()
    source_group.add_argument(
        '-i', '--image',
        help='Image file to explain in the terminal'
    )
    source_group.add_argument(
        '--camera',
        action='store_true',
        help='Capture one camera frame and explain it in the terminal'
    )
    source_group.add_argument(
        '-t', '--text',
        help='Text file to highlight in the terminal (no OCR, no explanation)'
    )

    parser.add_argument(
        '--no-explain',
        action='store_true',
        help='Only recognize and highlight the code'
    )

    # Display options
    parser.add_argument(
        '--scheme',
        help='Color scheme for highlighted code'
    )
    parser.add_argument(
        '--carry-block-comments',
        action='store_true',
        help='Continue /* block comments */ across lines'
    )
    parser.add_argument(
        '--theme',
        choices=['system', 'light', 'dark'],
        default=None,
        help='Application theme'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Settings file path'
    )
    parser.add_argument(
        '--env-file',
        help='.env file with GEMINI_API_KEY'
    )
    parser.add_argument(
        '--reset-settings',
        action='store_true',
        help='Reset all settings to defaults'
    )

    # Logging
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode (also writes a log file)'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Log level'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )

    parsed = parser.parse_args(args)

    result = CommandLineArgs()
    result.image_path = parsed.image
    result.text_path = parsed.text
    result.explain = not parsed.no_explain
    result.scheme = parsed.scheme
    result.carry_block_comments = parsed.carry_block_comments
    result.config_file = parsed.config
    result.env_file = parsed.env_file
    result.reset_settings = parsed.reset_settings
    result.debug = parsed.debug

    # Determine mode
    if parsed.image:
        result.mode = StartupMode.IMAGE
    elif parsed.camera:
        result.mode = StartupMode.CAMERA
    elif parsed.text:
        result.mode = StartupMode.TEXT
    else:
        result.mode = StartupMode.GUI

    if parsed.theme:
        result.theme = Theme.from_string(parsed.theme)

    # Log level; terminal modes stay quiet unless asked
    if parsed.debug or parsed.verbose:
        result.log_level = 'DEBUG'
    elif parsed.log_level:
        result.log_level = parsed.log_level
    elif result.mode != StartupMode.GUI:
        result.log_level = 'WARNING'

    return result


# =============================================================================
# Settings & Services
# =============================================================================

def setup_settings(args: CommandLineArgs) -> SettingsManager:
    """
    Load settings and apply command line overrides.

    Overrides are not saved.
    """
    manager = SettingsManager(Path(args.config_file) if args.config_file else None)

    if args.reset_settings:
        manager.reset()

    settings = manager.settings
    if args.scheme:
        settings.highlight.color_scheme = args.scheme
    if args.carry_block_comments:
        settings.highlight.carry_block_comments = True
    if args.theme:
        settings.ui.theme = args.theme

    return manager


def create_services(settings: ApplicationSettings, args: CommandLineArgs, path_provider=None):
    """
    Create the image picker and the pipeline.

    Returns:
        (picker, pipeline)
    """
    from code_explainer.core.pipeline import CodeExplainerPipeline
    from code_explainer.services.explainer import CodeExplainer
    from code_explainer.services.image_source import ImagePicker
    from code_explainer.services.ocr import TextRecognizer

    api_key = load_api_key(Path(args.env_file) if args.env_file else None)
    if not api_key:
        logging.getLogger(__name__).warning(
            "GEMINI_API_KEY is not set; explanations will fail until it is configured"
        )

    picker = ImagePicker(path_provider=path_provider, camera_index=settings.ocr.camera_index)
    pipeline = CodeExplainerPipeline(
        picker=picker,
        recognizer=TextRecognizer(settings.ocr),
        explainer=CodeExplainer(api_key=api_key, settings=settings.explainer),
    )
    return picker, pipeline


# =============================================================================
# Headless Mode
# =============================================================================

class _NoExplanation:
    """Explainer used with --no-explain."""

    def explain(self, code: str) -> str:
        return ""


def run_headless(
    args: CommandLineArgs,
    settings: ApplicationSettings,
    out: Optional[TextIO] = None
) -> int:
    """
    Run one flow in the terminal and print the result.

    Returns:
        Exit code
    """
    from code_explainer.core.highlight import Highlighter, get_scheme_by_name, render_ansi
    from code_explainer.core.models import ImageSource
    from code_explainer.services.errors import ServiceError

    out = out or sys.stdout
    logger = logging.getLogger(__name__)
    highlighter = Highlighter(carry_block_comments=settings.highlight.carry_block_comments)
    scheme = get_scheme_by_name(settings.highlight.color_scheme)
    use_colors = out.isatty()

    def show_code(text: str) -> None:
        document = highlighter.highlight(text)
        out.write((render_ansi(document, scheme) if use_colors else document.text) + "\n")

    if args.mode == StartupMode.TEXT:
        try:
            text = Path(args.text_path).read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            print(f"Cannot read {args.text_path}: {e}", file=sys.stderr)
            return 1
        show_code(text)
        return 0

    path_provider = (lambda: args.image_path) if args.image_path else None
    _, pipeline = create_services(settings, args, path_provider=path_provider)
    if not args.explain:
        pipeline.explainer = _NoExplanation()

    source = ImageSource.CAMERA if args.mode == StartupMode.CAMERA else ImageSource.GALLERY
    try:
        result = pipeline.process(source)
    except ServiceError as e:
        logger.debug("Headless run failed", exc_info=True)
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 1

    if result is None:
        print("No image was captured.", file=sys.stderr)
        return 1

    show_code(result.extracted_code)
    if args.explain:
        out.write("\n" + result.explanation + "\n")
    return 0


# =============================================================================
# GUI
# =============================================================================

def setup_application():
    """Create and configure the QApplication."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication(sys.argv)

    app.setApplicationName(APP_NAME)
    app.setApplicationDisplayName(APP_DISPLAY_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setOrganizationName(APP_ORGANIZATION)

    app.setQuitOnLastWindowClosed(True)

    return app


def setup_theme(app, theme: Theme) -> None:
    """
    Set up application theme.

    Args:
        app: QApplication instance
        theme: Theme to apply
    """
    from PyQt6.QtCore import Qt
    from PyQt6.QtGui import QColor, QPalette
    from PyQt6.QtWidgets import QStyleFactory

    logging.info(f"Setting up theme: {theme}")
    app.setStyle(QStyleFactory.create("Fusion"))

    if theme == Theme.SYSTEM:
        return

    if theme == Theme.DARK:
        window_color = QColor(45, 45, 45)
        base_color = QColor(35, 35, 35)
        text_color = QColor(212, 212, 212)
        highlight_color = QColor(42, 130, 218)
        highlighted_text = Qt.GlobalColor.black
        disabled_color = QColor(127, 127, 127)
    else:
        window_color = QColor(240, 240, 240)
        base_color = QColor(255, 255, 255)
        text_color = QColor(0, 0, 0)
        highlight_color = QColor(0, 120, 215)
        highlighted_text = Qt.GlobalColor.white
        disabled_color = QColor(160, 160, 160)

    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, window_color)
    palette.setColor(QPalette.ColorRole.WindowText, text_color)
    palette.setColor(QPalette.ColorRole.Base, base_color)
    palette.setColor(QPalette.ColorRole.AlternateBase, window_color)
    palette.setColor(QPalette.ColorRole.ToolTipBase, window_color)
    palette.setColor(QPalette.ColorRole.ToolTipText, text_color)
    palette.setColor(QPalette.ColorRole.Text, text_color)
    palette.setColor(QPalette.ColorRole.Button, window_color)
    palette.setColor(QPalette.ColorRole.ButtonText, text_color)
    palette.setColor(QPalette.ColorRole.BrightText, Qt.GlobalColor.red)
    palette.setColor(QPalette.ColorRole.Link, highlight_color)
    palette.setColor(QPalette.ColorRole.Highlight, highlight_color)
    palette.setColor(QPalette.ColorRole.HighlightedText, highlighted_text)

    # Disabled colors
    palette.setColor(QPalette.ColorGroup.Disabled, QPalette.ColorRole.WindowText, disabled_color)
    palette.setColor(QPalette.ColorGroup.Disabled, QPalette.ColorRole.Text, disabled_color)
    palette.setColor(QPalette.ColorGroup.Disabled, QPalette.ColorRole.ButtonText, disabled_color)

    app.setPalette(palette)


def create_main_window(manager: SettingsManager, args: CommandLineArgs):
    """
    Create the main window with its services.

    Returns:
        MainWindow instance
    """
    from code_explainer.ui.main_window import MainWindow

    picker, pipeline = create_services(manager.settings, args)
    return MainWindow(pipeline, picker, manager)


def setup_signal_handlers(app) -> None:
    """Set up Unix signal handlers."""
    from PyQt6.QtCore import QTimer

    if sys.platform != 'win32':
        # Handle SIGINT (Ctrl+C) gracefully
        signal.signal(signal.SIGINT, _signal_handler)
        signal.signal(signal.SIGTERM, _signal_handler)

        # Let the Python interpreter run so signals are delivered
        app._signal_timer = QTimer()
        app._signal_timer.timeout.connect(lambda: None)
        app._signal_timer.start(500)


def _signal_handler(signum, frame) -> None:
    """Handle Unix signals."""
    from PyQt6.QtWidgets import QApplication

    logging.info(f"Received signal {signum}, shutting down...")
    QApplication.quit()


def run_gui(manager: SettingsManager, args: CommandLineArgs, exception_handler: ExceptionHandler) -> int:
    """Start the GUI and run the event loop."""
    from PyQt6.QtWidgets import QApplication, QMessageBox

    logger = logging.getLogger(__name__)

    try:
        app = setup_application()
        exception_handler.enable_dialogs()

        setup_theme(app, manager.settings.ui.theme)
        setup_signal_handlers(app)

        main_window = create_main_window(manager, args)
        main_window.show()

        logger.info("Application started successfully")
        exit_code = app.exec()

        logger.info(f"Application exiting with code {exit_code}")
        return exit_code

    except Exception as e:
        logger.critical(f"Fatal error during startup: {e}", exc_info=True)

        if QApplication.instance():
            QMessageBox.critical(
                None,
                "Fatal Error",
                f"The application failed to start:\n\n{e}\n\n"
                "Please check the logs for more information."
            )
        return 1


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code (0 for success)
    """
    # Redirect stdout/stderr if None (common in frozen apps)
    if sys.stdout is None:
        sys.stdout = open(os.devnull, 'w')
    if sys.stderr is None:
        sys.stderr = open(os.devnull, 'w')

    faulthandler.enable()

    args = parse_arguments(argv)

    headless = args.mode != StartupMode.GUI
    log_file = LOGS_DIR / f"{APP_NAME}_{datetime.now():%Y%m%d}.log" if args.debug else None
    logger = setup_logging(args.log_level, log_file, stream=sys.stderr if headless else sys.stdout)
    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

    exception_handler = ExceptionHandler(logger)
    sys.excepthook = exception_handler.handle_exception

    manager = setup_settings(args)

    if headless:
        return run_headless(args, manager.settings)
    return run_gui(manager, args, exception_handler)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == '__main__':
    sys.exit(main())
