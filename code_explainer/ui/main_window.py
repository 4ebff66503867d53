"""
Main application window.

Provides the primary UI container with:
- Camera / gallery buttons and an image drop area
- Extracted code pane (highlighted)
- Code explanation pane
- Status bar with busy indicator
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import QMimeData, Qt, pyqtSlot
from PyQt6.QtGui import QAction, QActionGroup, QCloseEvent, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QSplitter,
    QStatusBar, QFileDialog, QMessageBox, QLabel, QProgressBar,
    QPushButton, QPlainTextEdit, QGroupBox, QApplication,
)

from code_explainer import __version__
from code_explainer.core.highlight import Highlighter, get_available_schemes, get_scheme_by_name
from code_explainer.core.models import ExplanationResult, HighlightedDocument, ImageSource
from code_explainer.core.pipeline import (
    CodeExplainerPipeline,
    STATUS_EXPLAINING,
    STATUS_PROCESSING,
)
from code_explainer.services.errors import ServiceError
from code_explainer.services.image_source import ImagePicker
from code_explainer.services.settings import SettingsManager
from code_explainer.ui.widgets import CodeView, DropArea
from code_explainer.workers import (
    BaseWorker,
    ExplainWorker,
    HighlightWorker,
    ImageExplainWorker,
    WorkerThread,
)


logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tif *.tiff *.webp);;All Files (*)"


class MainWindow(QMainWindow):
    """
    Main application window.

    Runs the capture / recognize / explain flow on a worker thread and
    shows the result. Only one flow runs at a time.
    """

    def __init__(
        self,
        pipeline: CodeExplainerPipeline,
        picker: ImagePicker,
        settings_manager: SettingsManager,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self._pipeline = pipeline
        self._picker = picker
        self._settings_manager = settings_manager
        self._settings = settings_manager.settings

        self._current_worker: Optional[WorkerThread] = None
        self._busy = False
        self._highlight_worker: Optional[WorkerThread] = None
        self._highlight_threads: list[WorkerThread] = []
        self._result = ExplanationResult.empty()

        self._setup_ui()
        self._setup_menus()
        self._setup_statusbar()
        self._show_result(self._result)

        self.setWindowTitle("Code Explainer")
        self.resize(self._settings.ui.window_width, self._settings.ui.window_height)

    # =========================================================================
    # Setup
    # =========================================================================

    def _setup_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)

        # Image selection
        picker_box = QGroupBox("Scan or Select Code Image")
        picker_layout = QVBoxLayout(picker_box)

        buttons = QHBoxLayout()
        self._camera_button = QPushButton("Camera")
        self._camera_button.clicked.connect(lambda: self._on_pick(ImageSource.CAMERA))
        self._gallery_button = QPushButton("Gallery")
        self._gallery_button.clicked.connect(lambda: self._on_pick(ImageSource.GALLERY))
        buttons.addWidget(self._camera_button)
        buttons.addWidget(self._gallery_button)
        picker_layout.addLayout(buttons)

        self._drop_area = DropArea()
        self._drop_area.image_dropped.connect(self._on_image_dropped)
        picker_layout.addWidget(self._drop_area)
        layout.addWidget(picker_box)

        # Results
        splitter = QSplitter(Qt.Orientation.Vertical)

        code_box = QGroupBox("Extracted Code")
        code_layout = QVBoxLayout(code_box)
        self._code_view = CodeView(
            color_scheme=get_scheme_by_name(self._settings.highlight.color_scheme),
            font_family=self._settings.ui.font_family,
            font_size=self._settings.ui.font_size,
        )
        code_layout.addWidget(self._code_view)
        splitter.addWidget(code_box)

        explanation_box = QGroupBox("Code Explanation")
        explanation_layout = QVBoxLayout(explanation_box)
        self._explanation_view = QPlainTextEdit()
        self._explanation_view.setReadOnly(True)
        explanation_layout.addWidget(self._explanation_view)
        splitter.addWidget(explanation_box)

        layout.addWidget(splitter, 1)
        self.setCentralWidget(central)

    def _setup_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")

        open_action = QAction("&Open Image...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(lambda: self._on_pick(ImageSource.GALLERY))
        file_menu.addAction(open_action)

        camera_action = QAction("&Capture From Camera", self)
        camera_action.triggered.connect(lambda: self._on_pick(ImageSource.CAMERA))
        file_menu.addAction(camera_action)

        file_menu.addSeparator()

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        edit_menu = menu_bar.addMenu("&Edit")
        copy_html_action = QAction("Copy Code as &HTML", self)
        copy_html_action.triggered.connect(self.copy_code_as_html)
        edit_menu.addAction(copy_html_action)

        view_menu = menu_bar.addMenu("&View")
        scheme_menu = view_menu.addMenu("Color Scheme")
        scheme_group = QActionGroup(self)
        for name in get_available_schemes():
            action = QAction(name, self, checkable=True)
            action.setChecked(name == self._settings.highlight.color_scheme)
            action.triggered.connect(lambda checked, n=name: self._on_scheme_selected(n))
            scheme_group.addAction(action)
            scheme_menu.addAction(action)

        carry_action = QAction("Multi-line Block Comments", self, checkable=True)
        carry_action.setChecked(self._settings.highlight.carry_block_comments)
        carry_action.toggled.connect(self._on_toggle_carry_comments)
        view_menu.addAction(carry_action)

        help_menu = menu_bar.addMenu("&Help")
        about_action = QAction("&About", self)
        about_action.triggered.connect(self._on_about)
        help_menu.addAction(about_action)

    def _setup_statusbar(self) -> None:
        self._statusbar = QStatusBar(self)
        self.setStatusBar(self._statusbar)

        self._status_label = QLabel("Ready")
        self._statusbar.addWidget(self._status_label, 1)

        self._progress_bar = QProgressBar()
        self._progress_bar.setMaximumWidth(200)
        self._progress_bar.hide()
        self._statusbar.addPermanentWidget(self._progress_bar)

    # =========================================================================
    # Actions
    # =========================================================================

    def _on_pick(self, source: ImageSource) -> None:
        """Start the flow for an image source."""
        if self._is_busy():
            return

        if source == ImageSource.GALLERY:
            path, _ = QFileDialog.getOpenFileName(
                self, "Select Code Image", self._settings.ui.last_directory, IMAGE_FILTER
            )
            if path:
                self._start_from_file(path)
            return

        self._start_worker(ExplainWorker(self._pipeline, ImageSource.CAMERA))

    @pyqtSlot(str)
    def _on_image_dropped(self, path: str) -> None:
        if not self._is_busy():
            self._start_from_file(path)

    def _start_from_file(self, path: str) -> None:
        try:
            image_bytes = self._picker.load_file(path)
        except ServiceError as e:
            self._on_worker_error(type(e).__name__, e.user_message)
            return

        self._settings_manager.remember_directory(path)
        self._start_worker(ImageExplainWorker(self._pipeline, image_bytes))

    def _start_worker(self, worker: BaseWorker) -> None:
        self._set_busy(True)

        thread = WorkerThread(worker, self)
        worker.signals.status.connect(self._on_worker_status)
        worker.signals.finished.connect(self._on_explain_complete)
        worker.signals.error.connect(self._on_worker_error)

        self._current_worker = thread
        thread.start()

    def _on_scheme_selected(self, name: str) -> None:
        self._settings.highlight.color_scheme = name
        self._code_view.set_color_scheme(get_scheme_by_name(name))
        self._settings_manager.save()

    def _on_toggle_carry_comments(self, enabled: bool) -> None:
        self._settings.highlight.carry_block_comments = enabled
        self._settings_manager.save()
        self._show_code(self._result.extracted_code)

    def copy_code_as_html(self) -> bool:
        """Put the highlighted code on the clipboard as HTML and plain text."""
        html = self._code_view.to_html()
        if html is None:
            return False

        mime = QMimeData()
        mime.setHtml(html)
        mime.setText(self._code_view.document_model.text)
        QApplication.clipboard().setMimeData(mime)
        self._status_label.setText("Copied code as HTML")
        return True

    def _on_about(self) -> None:
        QMessageBox.about(
            self,
            "About Code Explainer",
            f"Code Explainer {__version__}\n\n"
            "Recognizes code in images, explains it with Gemini and shows it "
            "with syntax coloring."
        )

    # =========================================================================
    # Worker Callbacks
    # =========================================================================

    @pyqtSlot(str)
    def _on_worker_status(self, message: str) -> None:
        self._status_label.setText(message)
        if message == STATUS_EXPLAINING:
            self._explanation_view.setPlainText(STATUS_EXPLAINING)

    def _on_explain_complete(self, result: Optional[ExplanationResult]) -> None:
        """Handle pipeline completion."""
        self._set_busy(False)
        if result is None:
            # Nothing was captured; keep showing the previous result
            self._show_result(self._result)
            return

        self._result = result
        self._show_result(result)
        self._status_label.setText("Done")

    def _on_worker_error(self, error_type: str, message: str) -> None:
        """Handle worker error."""
        logger.error(f"{error_type}: {message}")
        self._set_busy(False)
        self._result = ExplanationResult.empty()
        self._show_result(self._result)
        self._status_label.setText(message)
        QMessageBox.warning(self, "Code Explainer", message)

    # =========================================================================
    # Display
    # =========================================================================

    def _highlighter(self) -> Highlighter:
        return Highlighter(carry_block_comments=self._settings.highlight.carry_block_comments)

    def _show_result(self, result: ExplanationResult) -> None:
        self._show_code(result.extracted_code)
        self._explanation_view.setPlainText(result.explanation)

    def _show_code(self, text: str) -> None:
        self._supersede_highlight()

        if len(text) < self._settings.highlight.highlight_async_threshold:
            self._code_view.set_document(self._highlighter().highlight(text))
            return

        self._code_view.show_message("Highlighting...")
        worker = HighlightWorker(text, self._highlighter())
        thread = WorkerThread(worker, self)
        worker.signals.finished.connect(self._on_highlight_complete)
        worker.signals.error.connect(self._on_highlight_error)
        self._highlight_worker = thread
        self._highlight_threads = [t for t in self._highlight_threads if t.isRunning()]
        self._highlight_threads.append(thread)
        thread.start()

    def _supersede_highlight(self) -> None:
        """Cancel the running highlight; its result is ignored if it still arrives."""
        if self._highlight_worker is not None and self._highlight_worker.isRunning():
            self._highlight_worker.cancel()
        self._highlight_worker = None

    def _is_current_highlight(self, document: Optional[HighlightedDocument]) -> bool:
        current = self._highlight_worker
        return current is not None and document is current.worker.result

    def _on_highlight_complete(self, document: HighlightedDocument) -> None:
        if not self._is_current_highlight(document):
            return
        self._highlight_worker = None
        self._code_view.set_document(document)

    def _on_highlight_error(self, error_type: str, message: str) -> None:
        """Show the code unhighlighted; a running flow is not affected."""
        current = self._highlight_worker
        if current is None or current.worker.error is None:
            return
        logger.error(f"Highlighting failed: {error_type}: {message}")
        self._highlight_worker = None
        self._code_view.show_message(self._result.extracted_code)

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        self._camera_button.setEnabled(not busy)
        self._gallery_button.setEnabled(not busy)
        self._drop_area.setEnabled(not busy)

        if busy:
            self._supersede_highlight()
            self._code_view.show_message(STATUS_PROCESSING)
            self._explanation_view.setPlainText(STATUS_EXPLAINING)
            self._status_label.setText(STATUS_PROCESSING)
            self._progress_bar.setMaximum(0)  # Indeterminate
            self._progress_bar.show()
        else:
            self._progress_bar.hide()
            self._status_label.setText("Ready")

    def _is_busy(self) -> bool:
        return self._busy

    def closeEvent(self, event: QCloseEvent) -> None:
        for thread in [self._current_worker, *self._highlight_threads]:
            if thread is not None and thread.isRunning():
                thread.cancel()
                thread.wait(2000)

        self._settings.ui.window_width = self.width()
        self._settings.ui.window_height = self.height()
        self._settings_manager.save()
        event.accept()
