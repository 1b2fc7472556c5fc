"""
Preset manager dialog: save the current bands by name, load or delete presets
"""

from PyQt6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QListWidget,
    QListWidgetItem,
    QLabel,
)
from PyQt6.QtCore import Qt, pyqtSignal

from ..config import BUILTIN_PRESETS, EQPreset
from .layout_constants import SPACING_NORMAL, INFO_LABEL_STYLE


class PresetDialog(QDialog):
    """
    Modal preset list.

    The dialog does not persist anything itself: it emits save/delete/load
    requests and the main window updates the store.
    """

    save_requested = pyqtSignal(str)       # preset name
    load_requested = pyqtSignal(object)    # EQPreset
    delete_requested = pyqtSignal(str)     # preset id

    def __init__(self, presets: list[EQPreset], parent=None):
        super().__init__(parent)
        self.setWindowTitle("Presets")
        self.setMinimumWidth(360)
        self._presets = list(presets)
        self._setup_ui()
        self._refresh_list()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setSpacing(SPACING_NORMAL)

        save_layout = QHBoxLayout()
        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("New Preset Name")
        self.name_edit.returnPressed.connect(self._on_save)
        save_layout.addWidget(self.name_edit)

        save_btn = QPushButton("Save")
        save_btn.clicked.connect(self._on_save)
        save_layout.addWidget(save_btn)
        layout.addLayout(save_layout)

        self.preset_list = QListWidget()
        self.preset_list.itemDoubleClicked.connect(self._on_item_activated)
        layout.addWidget(self.preset_list)

        self.empty_label = QLabel("No presets saved.")
        self.empty_label.setStyleSheet(INFO_LABEL_STYLE)
        layout.addWidget(self.empty_label)

        buttons = QHBoxLayout()
        load_btn = QPushButton("Load")
        load_btn.clicked.connect(self._on_load)
        buttons.addWidget(load_btn)

        self.delete_btn = QPushButton("Delete")
        self.delete_btn.clicked.connect(self._on_delete)
        buttons.addWidget(self.delete_btn)

        buttons.addStretch()

        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.reject)
        buttons.addWidget(close_btn)
        layout.addLayout(buttons)

    def _refresh_list(self):
        self.preset_list.clear()
        for preset in BUILTIN_PRESETS.values():
            item = QListWidgetItem(f"{preset.name}  (built-in)")
            item.setData(Qt.ItemDataRole.UserRole, preset)
            self.preset_list.addItem(item)
        for preset in self._presets:
            item = QListWidgetItem(preset.name)
            item.setData(Qt.ItemDataRole.UserRole, preset)
            self.preset_list.addItem(item)
        self.empty_label.setVisible(not self._presets)

    def _selected_preset(self):
        item = self.preset_list.currentItem()
        if item is None:
            return None
        return item.data(Qt.ItemDataRole.UserRole)

    def _on_save(self):
        name = self.name_edit.text().strip()
        if not name:
            return
        self.save_requested.emit(name)
        self.name_edit.clear()
        self.accept()

    def _on_item_activated(self, item):
        self.load_requested.emit(item.data(Qt.ItemDataRole.UserRole))
        self.accept()

    def _on_load(self):
        preset = self._selected_preset()
        if preset is not None:
            self.load_requested.emit(preset)
            self.accept()

    def _on_delete(self):
        preset = self._selected_preset()
        if preset is None or preset.id.startswith("builtin:"):
            return
        self.delete_requested.emit(preset.id)
        self._presets = [p for p in self._presets if p.id != preset.id]
        self._refresh_list()
