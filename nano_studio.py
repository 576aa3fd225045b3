from pathlib import Path
from typing import Any, Callable, Dict, Optional

import logging
import sys

from PyQt5.QtCore import QObject, QRunnable, Qt, QThreadPool, pyqtSignal, pyqtSlot
from PyQt5.QtGui import QPixmap
from PyQt5.QtWidgets import (
    QApplication,
    QComboBox,
    QFileDialog,
    QGridLayout,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from NS_Libs.GenerationLib import (
    ArtStyle,
    AspectRatio,
    GenerationClient,
    GenerationResult,
    ImagePayload,
    ImageSize,
    RotationMode,
    Season,
    TimeOfDay,
    Viewpoint,
)
from NS_Libs.MaskingLib.mask_editor_window import MaskEditorWindow
from NS_Libs.StudioLib import StudioConfig, StudioSession, load_config, save_config, save_result
from NS_Libs.constants import DEFAULT_WINDOW_HEIGHT, DEFAULT_WINDOW_WIDTH

logger = logging.getLogger(__name__)

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp)"
DEFAULT_CHOICE = "Default"


def _optional_member(enum_cls: Any, value: Any) -> Any:
    # Qt hands str-based enum members back as plain strings
    return enum_cls(value) if value else None


class WorkerSignals(QObject):
    result = pyqtSignal(object)
    error = pyqtSignal(str)


class BackgroundWorker(QRunnable):
    """Runs one blocking call on the thread pool and reports back through signals.

    Every exception is reported through ``error``, so the window always
    leaves its busy state.
    """

    def __init__(self, func: Callable[[], Any]) -> None:
        super().__init__()
        self.func = func
        self.signals = WorkerSignals()

    @pyqtSlot()
    def run(self) -> None:
        try:
            result = self.func()
        except Exception as e:
            logger.exception("Background task failed")
            self.signals.error.emit(str(e) or e.__class__.__name__)
            return
        self.signals.result.emit(result)


class NanoStudioMainWindow(QMainWindow):
    def __init__(self, config: Optional[StudioConfig] = None) -> None:
        super().__init__()
        self.setWindowTitle("Nano Studio")
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)

        self.config = config or load_config()
        self.client = GenerationClient.from_config(self.config)
        self.session = StudioSession(default_brush_radius=self.config.default_brush_radius)
        self.viewpoint_buttons: Dict[Viewpoint, QPushButton] = {}
        self.thread_pool = QThreadPool.globalInstance()
        self._worker: Optional[BackgroundWorker] = None
        self._on_result: Optional[Callable[[Any], None]] = None

        self._build_ui()
        self._connect_signals()
        self.refresh_inputs()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QHBoxLayout(central)
        controls_col = QVBoxLayout()

        self.btn_api_key = QPushButton("Set API Key")
        self.btn_load_source = QPushButton("Load Source Image")
        self.btn_edit_mask = QPushButton("Edit Mask")
        self.btn_remove_source = QPushButton("Remove Source")
        self.label_source = QLabel()
        self.btn_load_reference = QPushButton("Load Reference Image")
        self.btn_remove_reference = QPushButton("Remove Reference")
        self.label_reference = QLabel()

        self.prompt_edit = QTextEdit()
        self.prompt_edit.setPlaceholderText("Describe your image...")
        self.btn_magic_prompt = QPushButton("Magic Prompt")

        self.combo_rotation = QComboBox()
        for mode in RotationMode:
            self.combo_rotation.addItem(mode.value.capitalize(), mode)

        viewpoint_grid = QGridLayout()
        for index, viewpoint in enumerate(Viewpoint):
            button = QPushButton(viewpoint.value)
            button.setCheckable(True)
            self.viewpoint_buttons[viewpoint] = button
            viewpoint_grid.addWidget(button, index // 2, index % 2)

        self.combo_time = self._optional_combo(TimeOfDay)
        self.combo_season = self._optional_combo(Season)
        self.combo_style = self._optional_combo(ArtStyle)
        self.combo_size = QComboBox()
        for size in ImageSize:
            self.combo_size.addItem(size.value, size)
        self.combo_ratio = QComboBox()
        for ratio in AspectRatio:
            self.combo_ratio.addItem(ratio.value, ratio)

        self.btn_generate = QPushButton("Generate Image")
        self.btn_save_result = QPushButton("Save Result")
        self.btn_save_result.setEnabled(False)

        self.label_result = QLabel("Generated image appears here")
        self.label_result.setAlignment(Qt.AlignCenter)
        self.label_result.setMinimumSize(600, 600)
        self.label_result.setStyleSheet("border: 1px solid #888;")

        controls_col.addWidget(self.btn_api_key)
        controls_col.addWidget(QLabel("Source Image (Edit/Inpaint)"))
        controls_col.addWidget(self.btn_load_source)
        controls_col.addWidget(self.btn_edit_mask)
        controls_col.addWidget(self.btn_remove_source)
        controls_col.addWidget(self.label_source)
        controls_col.addWidget(QLabel("Reference Image (Style/Content)"))
        controls_col.addWidget(self.btn_load_reference)
        controls_col.addWidget(self.btn_remove_reference)
        controls_col.addWidget(self.label_reference)
        controls_col.addWidget(QLabel("Prompt"))
        controls_col.addWidget(self.prompt_edit)
        controls_col.addWidget(self.btn_magic_prompt)
        controls_col.addWidget(QLabel("Orientation"))
        controls_col.addWidget(self.combo_rotation)
        controls_col.addLayout(viewpoint_grid)
        controls_col.addWidget(QLabel("Time of Day"))
        controls_col.addWidget(self.combo_time)
        controls_col.addWidget(QLabel("Season"))
        controls_col.addWidget(self.combo_season)
        controls_col.addWidget(QLabel("Style"))
        controls_col.addWidget(self.combo_style)
        controls_col.addWidget(QLabel("Resolution"))
        controls_col.addWidget(self.combo_size)
        controls_col.addWidget(QLabel("Aspect Ratio"))
        controls_col.addWidget(self.combo_ratio)
        controls_col.addWidget(self.btn_generate)
        controls_col.addWidget(self.btn_save_result)

        root.addLayout(controls_col, stretch=1)
        root.addWidget(self.label_result, stretch=2)

    def _optional_combo(self, enum_cls: Any) -> QComboBox:
        combo = QComboBox()
        combo.addItem(DEFAULT_CHOICE, None)
        for member in enum_cls:
            combo.addItem(member.value, member)
        return combo

    def _connect_signals(self) -> None:
        self.btn_api_key.clicked.connect(self.ask_api_key)
        self.btn_load_source.clicked.connect(self.load_source)
        self.btn_edit_mask.clicked.connect(self.edit_mask)
        self.btn_remove_source.clicked.connect(self.remove_source)
        self.btn_load_reference.clicked.connect(self.load_reference)
        self.btn_remove_reference.clicked.connect(self.remove_reference)
        self.btn_magic_prompt.clicked.connect(self.magic_prompt)
        self.btn_generate.clicked.connect(self.generate)
        self.btn_save_result.clicked.connect(self.save_current_result)
        self.prompt_edit.textChanged.connect(self.refresh_inputs)
        for viewpoint, button in self.viewpoint_buttons.items():
            button.clicked.connect(lambda _checked, v=viewpoint: self.toggle_viewpoint(v))

    def ask_api_key(self) -> None:
        key, ok = QInputDialog.getText(
            self, "API Key", "Gemini API key:", QLineEdit.Password, self.config.api_key or ""
        )
        if not ok:
            return

        self.config.api_key = key.strip() or None
        save_config(self.config)
        self.client = GenerationClient.from_config(self.config)

    def _pick_image(self, title: str) -> Optional[ImagePayload]:
        path_str, _ = QFileDialog.getOpenFileName(self, title, "", IMAGE_FILE_FILTER)
        if not path_str:
            return None

        try:
            return ImagePayload.from_file(Path(path_str))
        except (OSError, ValueError) as e:
            QMessageBox.warning(self, "Could not load image", str(e))
            return None

    def load_source(self) -> None:
        payload = self._pick_image("Select Source Image")
        if payload is not None:
            self.session.set_source(payload)
            self.refresh_inputs()

    def remove_source(self) -> None:
        self.session.remove_source()
        self.refresh_inputs()

    def load_reference(self) -> None:
        payload = self._pick_image("Select Reference Image")
        if payload is not None:
            self.session.set_reference(payload)
            self.refresh_inputs()

    def remove_reference(self) -> None:
        self.session.remove_reference()
        self.refresh_inputs()

    def edit_mask(self) -> None:
        if self.session.source is None:
            return
        try:
            editor = MaskEditorWindow(self.session, self)
        except (OSError, ValueError) as e:
            self.session.cancel_mask_editor()
            QMessageBox.warning(self, "Could not open mask editor", str(e))
            return
        editor.exec_()
        self.refresh_inputs()

    def toggle_viewpoint(self, viewpoint: Viewpoint) -> None:
        selected = self.session.settings.toggle_viewpoint(viewpoint)
        self.viewpoint_buttons[viewpoint].setChecked(selected)

    def collect_settings(self) -> None:
        settings = self.session.settings
        settings.prompt = self.prompt_edit.toPlainText()
        settings.rotation_mode = RotationMode(self.combo_rotation.currentData())
        settings.time_of_day = _optional_member(TimeOfDay, self.combo_time.currentData())
        settings.season = _optional_member(Season, self.combo_season.currentData())
        settings.style = _optional_member(ArtStyle, self.combo_style.currentData())
        settings.image_size = ImageSize(self.combo_size.currentData())
        settings.aspect_ratio = AspectRatio(self.combo_ratio.currentData())

    def refresh_inputs(self) -> None:
        source = self.session.source
        if source is None:
            self.label_source.setText("No source image")
        else:
            mask_note = " - Mask Applied" if self.session.mask is not None else ""
            self.label_source.setText(f"{source.width}x{source.height}{mask_note}")

        reference = self.session.reference
        self.label_reference.setText(
            "No reference image" if reference is None else f"{reference.width}x{reference.height}"
        )

        busy = self._worker is not None
        self.btn_load_source.setEnabled(not busy)
        self.btn_load_reference.setEnabled(not busy)
        self.btn_edit_mask.setEnabled(not busy and source is not None)
        self.btn_remove_source.setEnabled(not busy and source is not None)
        self.btn_remove_reference.setEnabled(not busy and reference is not None)
        has_prompt = bool(self.prompt_edit.toPlainText().strip())
        self.btn_generate.setEnabled(not busy and (has_prompt or source is not None or reference is not None))
        self.btn_magic_prompt.setEnabled(not busy and has_prompt)

    def _run_in_background(self, func: Callable[[], Any], on_result: Callable[[Any], None]) -> None:
        worker = BackgroundWorker(func)
        worker.signals.result.connect(self._on_worker_result)
        worker.signals.error.connect(self._on_worker_error)
        self._worker = worker
        self._on_result = on_result
        self.thread_pool.start(worker)
        self.refresh_inputs()

    def _on_worker_result(self, result: Any) -> None:
        on_result = self._on_result
        self._worker = None
        self._on_result = None
        self.refresh_inputs()
        if on_result is not None:
            on_result(result)

    def _on_worker_error(self, message: str) -> None:
        self._worker = None
        self._on_result = None
        self.refresh_inputs()
        self.label_result.setText("Request failed")
        QMessageBox.warning(self, "Request failed", message)

    def magic_prompt(self) -> None:
        if self._worker is not None:
            return

        prompt = self.prompt_edit.toPlainText()
        self._run_in_background(lambda: self.client.enhance_prompt(prompt), self.prompt_edit.setPlainText)

    def generate(self) -> None:
        if self._worker is not None:
            return

        self.collect_settings()
        self.label_result.setText("Dreaming...")
        self.btn_save_result.setEnabled(False)
        self._run_in_background(lambda: self.session.generate(self.client), self.show_result)

    def show_result(self, result: GenerationResult) -> None:
        if not result.ok:
            self.label_result.setText("Generation failed")
            QMessageBox.warning(self, "Generation failed", result.failure.message)
            return

        pixmap = QPixmap()
        if not pixmap.loadFromData(result.image.data):
            self.label_result.setText("Preview failed")
            return

        scaled = pixmap.scaled(
            self.label_result.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.label_result.setPixmap(scaled)
        self.btn_save_result.setEnabled(True)

    def save_current_result(self) -> None:
        result = self.session.last_result
        if result is None or not result.ok:
            return

        folder = QFileDialog.getExistingDirectory(
            self, "Select Save Directory", self.config.output_directory or ""
        )
        if not folder:
            return

        save_path = save_result(result, Path(folder))
        QMessageBox.information(self, "Success", f"Image saved to {save_path}")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    try:
        config = load_config()
    except ValueError as e:
        logger.warning(f"Ignoring unreadable settings file: {e}")
        config = StudioConfig()
    window = NanoStudioMainWindow(config)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
