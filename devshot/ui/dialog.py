"""
Screen capture window.

A thin PySide6 shell over ScreenSession: buttons drive refresh, rotate, save,
copy and key relays; presses and releases on the image become taps or swipes.
"""
from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QGuiApplication, QImage, QPixmap
from PySide6.QtWidgets import QApplication, QDialog, QFileDialog, QFrame, QGridLayout, QLabel, QPushButton, QWidget

from devshot.actions.types import KEYCODE_BACK, KEYCODE_HOME
from devshot.config import settings
from devshot.imaging.export import default_filename
from devshot.session import ScreenSession

logger = logging.getLogger(__name__)

BUTTON_WIDTH = 80


def to_qimage(image: Image.Image) -> QImage:
    rgb = image.convert("RGB")
    data = rgb.tobytes("raw", "RGB")
    qimage = QImage(data, rgb.width, rgb.height, rgb.width * 3, QImage.Format.Format_RGB888)
    # detach from the Python buffer before it is collected
    return qimage.copy()


class QtClipboard:
    def set_image(self, image: Image.Image) -> None:
        QGuiApplication.clipboard().setImage(to_qimage(image))


class ScreenLabel(QLabel):
    gesture = Signal(int, int, int, int)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._down: tuple[int, int] | None = None

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position().toPoint()
            self._down = (pos.x(), pos.y())
            logger.debug("mouseDown: %s", self._down)
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton and self._down is not None:
            pos = event.position().toPoint()
            logger.debug("mouseUp: %s", (pos.x(), pos.y()))
            x1, y1 = self._down
            self._down = None
            self.gesture.emit(x1, y1, pos.x(), pos.y())
        super().mouseReleaseEvent(event)


class ScreenShotDialog(QDialog):
    def __init__(self, session: ScreenSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.session = session
        self.clipboard = QtClipboard()
        self.setWindowTitle("Device Screen Capture")
        self._build()

    def _button(self, text: str, slot, column: int) -> QPushButton:
        btn = QPushButton(text, self)
        btn.setFixedWidth(BUTTON_WIDTH)
        btn.clicked.connect(slot)
        self._layout.addWidget(btn, 0, column, alignment=Qt.AlignmentFlag.AlignHCenter)
        return btn

    def _build(self) -> None:
        self._layout = QGridLayout(self)
        self._button("Refresh", self.refresh_image, 0)
        self._button("Rotate", self.rotate_image, 1)
        self.save_button = self._button("Save", self.save_image, 2)
        copy = self._button("Copy", self.copy_image, 3)
        copy.setToolTip("Copy the screenshot to the clipboard")
        done = self._button("Done", self.close, 4)
        self._button("Home", lambda: self.press_key(KEYCODE_HOME), 5)
        self._button("Back", lambda: self.press_key(KEYCODE_BACK), 6)
        done.setDefault(True)

        self.status_label = QLabel("Preparing...", self)
        self._layout.addWidget(self.status_label, 1, 0, 1, 7, alignment=Qt.AlignmentFlag.AlignLeft)

        self.image_label = ScreenLabel(self)
        self.image_label.setFrameShape(QFrame.Shape.Box)
        self.image_label.gesture.connect(self.relay_gesture)
        self._layout.addWidget(self.image_label, 2, 0, 1, 7, alignment=Qt.AlignmentFlag.AlignHCenter)
        self.save_button.setEnabled(False)

    def _busy(self, fn):
        self.status_label.setText("Capturing...")
        QApplication.processEvents()
        QApplication.setOverrideCursor(Qt.CursorShape.WaitCursor)
        try:
            fn()
        finally:
            QApplication.restoreOverrideCursor()
        self.update_display()

    def update_display(self) -> None:
        frame = self.session.frame
        if frame is None:
            return
        self.image_label.setPixmap(QPixmap.fromImage(to_qimage(frame.image)))
        self.image_label.adjustSize()
        self.save_button.setEnabled(self.session.can_save)
        self.status_label.setText("Captured image:" if frame.available else "Screen not available")
        self.adjustSize()

    def refresh_image(self) -> None:
        self._busy(self.session.refresh)

    def rotate_image(self) -> None:
        if self.session.rotate() is not None:
            self.update_display()

    def relay_gesture(self, x1: int, y1: int, x2: int, y2: int) -> None:
        self._busy(lambda: self.session.relay_gesture((x1, y1), (x2, y2)))

    def press_key(self, keycode: int) -> None:
        self._busy(lambda: self.session.press_key(keycode))

    def save_image(self) -> None:
        start_dir = Path(settings.save_dir) if settings.save_dir else Path.cwd()
        path, _ = QFileDialog.getSaveFileName(
            self, "Save image...", str(start_dir / default_filename()), "PNG Files (*.png)"
        )
        if path:
            self.session.save(path)

    def copy_image(self) -> None:
        self.session.copy(self.clipboard)


def run_dialog(session: ScreenSession) -> int:
    app = QApplication.instance() or QApplication([])
    app.setApplicationName(settings.app_name)
    dlg = ScreenShotDialog(session)
    dlg.show()
    dlg.refresh_image()
    return dlg.exec()
