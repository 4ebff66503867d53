from PyQt6.QtWidgets import QFrame, QVBoxLayout, QLabel, QWidget
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QDragEnterEvent, QDragLeaveEvent, QDropEvent
from pathlib import Path
from typing import Optional

IMAGE_EXTENSIONS = {
    '.png', '.jpg', '.jpeg', '.gif', '.bmp', '.tiff', '.tif', '.webp',
}


class DropArea(QFrame):
    """
    A drag-and-drop target for code images.
    Provides visual feedback during drag operations.
    """

    image_dropped = pyqtSignal(str)  # Path of the first dropped image

    def __init__(self, message: str = "Drop an image of code here", parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setAcceptDrops(True)
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setFrameShadow(QFrame.Shadow.Sunken)
        self.setLineWidth(2)
        self.setMinimumHeight(60)

        layout = QVBoxLayout(self)
        self._label = QLabel(message)
        self._label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._label)

        self._is_dragging = False
        self._update_style()

    @staticmethod
    def image_paths(event) -> list[str]:
        """Local image files carried by a drag event."""
        if not event.mimeData().hasUrls():
            return []
        return [
            url.toLocalFile() for url in event.mimeData().urls()
            if url.isLocalFile() and Path(url.toLocalFile()).suffix.lower() in IMAGE_EXTENSIONS
        ]

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if self.image_paths(event):
            event.acceptProposedAction()
            self._is_dragging = True
            self._update_style()
        else:
            event.ignore()

    def dragLeaveEvent(self, event: QDragLeaveEvent) -> None:
        event.accept()
        self._is_dragging = False
        self._update_style()

    def dropEvent(self, event: QDropEvent) -> None:
        paths = self.image_paths(event)
        self._is_dragging = False
        self._update_style()
        if paths:
            event.acceptProposedAction()
            self.image_dropped.emit(paths[0])
        else:
            event.ignore()

    def _update_style(self):
        palette = self.palette()
        if self._is_dragging:
            # Highlight border and background while dragging over
            self.setStyleSheet(f"""
                QFrame {{
                    border: 2px dashed {palette.highlight().color().name()};
                    background-color: {palette.highlight().color().lighter(180).name()};
                    border-radius: 8px;
                }}
                QLabel {{
                    color: {palette.highlight().color().name()};
                }}
            """)
        else:
            self.setStyleSheet(f"""
                QFrame {{
                    border: 1px dashed {palette.midlight().color().name()};
                    border-radius: 8px;
                }}
                QLabel {{
                    color: {palette.text().color().name()};
                }}
            """)
