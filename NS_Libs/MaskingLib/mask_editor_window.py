from typing import Any, Optional

from PyQt5.QtCore import QRectF, Qt
from PyQt5.QtGui import QImage, QPainter, QPixmap
from PyQt5.QtWidgets import (
    QButtonGroup,
    QDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from NS_Libs.MaskingLib.coordinate_mapper import DisplayRect, map_to_native
from NS_Libs.MaskingLib.mask_compositor import BrushMode, MaskCompositor
from NS_Libs.constants import (
    DEFAULT_EDITOR_HEIGHT,
    DEFAULT_EDITOR_WIDTH,
    MAX_BRUSH_RADIUS,
    MIN_BRUSH_RADIUS,
    SOURCE_PREVIEW_OPACITY,
)


def pil_to_qimage(image: Any) -> QImage:
    rgba = image.convert("RGBA")
    data = rgba.tobytes("raw", "RGBA")
    qimage = QImage(data, rgba.width, rgba.height, rgba.width * 4, QImage.Format_RGBA8888)
    return qimage.copy()


class MaskCanvas(QWidget):
    """Shows the source image dimmed, with the drawing surface on top, and
    feeds mouse input into a MaskCompositor."""

    def __init__(self, compositor: MaskCompositor, source_image: Any, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.compositor = compositor
        self.stroke_finished = None
        self.source_pixmap = QPixmap.fromImage(pil_to_qimage(source_image))
        self.setMouseTracking(False)
        self.setCursor(Qt.CrossCursor)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

    def display_rect(self) -> DisplayRect:
        """Rectangle the surface occupies right now (aspect-fit, centered)."""
        native_size = self.compositor.native_size
        if native_size is None or self.width() <= 0 or self.height() <= 0:
            return DisplayRect(0.0, 0.0, 0.0, 0.0)

        native_width, native_height = native_size
        scale = min(self.width() / native_width, self.height() / native_height)
        width = native_width * scale
        height = native_height * scale
        return DisplayRect((self.width() - width) / 2, (self.height() - height) / 2, width, height)

    def _native_point(self, event: Any) -> Optional[tuple]:
        return map_to_native(event.x(), event.y(), self.compositor.native_size, self.display_rect())

    def mousePressEvent(self, event: Any) -> None:
        if event.button() != Qt.LeftButton:
            return
        point = self._native_point(event)
        if point is not None and self.compositor.begin_stroke(point):
            self.update()

    def mouseMoveEvent(self, event: Any) -> None:
        if not (event.buttons() & Qt.LeftButton):
            return
        point = self._native_point(event)
        if point is not None and self.compositor.extend_stroke(point):
            self.update()

    def mouseReleaseEvent(self, event: Any) -> None:
        self.compositor.end_stroke()
        if self.stroke_finished is not None:
            self.stroke_finished()

    def leaveEvent(self, event: Any) -> None:
        self.compositor.end_stroke()

    def paintEvent(self, event: Any) -> None:
        rect = self.display_rect()
        if rect.is_degenerate:
            return

        target = QRectF(rect.left, rect.top, rect.width, rect.height)
        painter = QPainter(self)
        painter.fillRect(self.rect(), Qt.black)
        painter.setOpacity(SOURCE_PREVIEW_OPACITY)
        painter.drawPixmap(target, self.source_pixmap, QRectF(self.source_pixmap.rect()))

        surface = self.compositor.surface
        if surface is not None:
            painter.setOpacity(1.0)
            painter.drawImage(target, pil_to_qimage(surface))
        painter.end()


class MaskEditorWindow(QDialog):
    """Modal mask editor for the session's source image.

    Accepting stores the exported mask on the session; rejecting discards
    the surface.
    """

    def __init__(self, session: Any, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Edit Mask")
        self.resize(DEFAULT_EDITOR_WIDTH, DEFAULT_EDITOR_HEIGHT)

        self.session = session
        source_image = session.source.to_image()
        self.compositor = session.open_mask_editor()
        self.canvas = MaskCanvas(self.compositor, source_image, self)
        self.canvas.stroke_finished = self.refresh_status

        self._build_ui()
        self._connect_signals()
        self.refresh_status()

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        toolbar = QHBoxLayout()
        actions = QHBoxLayout()

        self.btn_paint = QPushButton("Brush")
        self.btn_erase = QPushButton("Eraser")
        self.btn_paint.setCheckable(True)
        self.btn_erase.setCheckable(True)
        self.btn_paint.setChecked(True)
        self.mode_group = QButtonGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_group.addButton(self.btn_paint)
        self.mode_group.addButton(self.btn_erase)

        self.slider_radius = QSlider(Qt.Horizontal)
        self.slider_radius.setRange(MIN_BRUSH_RADIUS, MAX_BRUSH_RADIUS)
        self.slider_radius.setValue(int(self.compositor.brush_radius))
        self.label_radius = QLabel()

        self.btn_clear = QPushButton("Clear Mask")
        self.label_status = QLabel()
        self.btn_cancel = QPushButton("Cancel")
        self.btn_apply = QPushButton("Apply Mask")

        toolbar.addWidget(self.btn_paint)
        toolbar.addWidget(self.btn_erase)
        toolbar.addWidget(self.label_radius)
        toolbar.addWidget(self.slider_radius, stretch=1)
        toolbar.addWidget(self.btn_clear)

        actions.addWidget(self.label_status, stretch=1)
        actions.addWidget(self.btn_cancel)
        actions.addWidget(self.btn_apply)

        root.addLayout(toolbar)
        root.addWidget(self.canvas, stretch=1)
        root.addWidget(QLabel("Paint white areas to edit. Black areas remain unchanged."))
        root.addLayout(actions)

    def _connect_signals(self) -> None:
        self.btn_paint.clicked.connect(lambda: self.set_mode(BrushMode.PAINT))
        self.btn_erase.clicked.connect(lambda: self.set_mode(BrushMode.ERASE))
        self.slider_radius.valueChanged.connect(self.set_brush_radius)
        self.btn_clear.clicked.connect(self.clear_mask)
        self.btn_cancel.clicked.connect(self.reject)
        self.btn_apply.clicked.connect(self.apply_mask)

    def set_mode(self, mode: BrushMode) -> None:
        self.compositor.mode = mode

    def set_brush_radius(self, value: int) -> None:
        self.compositor.brush_radius = value
        self.label_radius.setText(f"Radius {value}px")

    def clear_mask(self) -> None:
        self.compositor.clear_all()
        self.canvas.update()
        self.refresh_status()

    def refresh_status(self) -> None:
        self.label_radius.setText(f"Radius {int(self.compositor.brush_radius)}px")
        size = self.compositor.native_size
        if size is None:
            self.label_status.setText("Waiting for image size...")
            self.btn_apply.setEnabled(False)
            return
        self.btn_apply.setEnabled(True)
        self.label_status.setText(
            f"{size[0]}x{size[1]} mask, {self.compositor.coverage():.0%} marked for editing"
        )

    def apply_mask(self) -> None:
        if self.session.save_mask() is not None:
            self.accept()

    def reject(self) -> None:
        self.session.cancel_mask_editor()
        super().reject()
