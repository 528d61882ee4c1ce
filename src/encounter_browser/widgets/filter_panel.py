"""
Encounter filter panel.

Left-hand controls editing the structured SearchFilter: minimum duration,
boss names, party classes, cleared-only and favorites-only.
"""

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import (
    QFrame,
    QVBoxLayout,
    QLabel,
    QSpinBox,
    QCheckBox,
    QListWidget,
    QListWidgetItem,
    QPushButton,
)

from ..core.classes import CLASS_NAMES, class_icon_path
from ..core.models import DEFAULT_MIN_DURATION, SearchFilter
from ..utils.logging_config import get_logger

logger = get_logger("filter_panel")


class FilterPanel(QFrame):
    """
    Controls for the structured filter.

    Emits filter_changed with a fresh SearchFilter whenever a control
    changes; the panel never hands out its internal state.
    """

    filter_changed = Signal(object)  # SearchFilter

    def __init__(self, parent=None):
        super().__init__(parent)
        self._updating = False
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(8)

        duration_label = QLabel("Minimum duration (s):")
        duration_label.setStyleSheet("color: #888; font-size: 11px;")
        layout.addWidget(duration_label)

        # -1 shows as "Default" and maps to the settings value
        self._duration_spin = QSpinBox()
        self._duration_spin.setRange(-1, 3600)
        self._duration_spin.setSpecialValueText("Default")
        self._duration_spin.setValue(-1)
        self._duration_spin.valueChanged.connect(self._emit_filter)
        layout.addWidget(self._duration_spin)

        self._cleared_check = QCheckBox("Cleared only")
        self._cleared_check.toggled.connect(self._emit_filter)
        layout.addWidget(self._cleared_check)

        self._favorites_check = QCheckBox("Favorites only")
        self._favorites_check.toggled.connect(self._emit_filter)
        layout.addWidget(self._favorites_check)

        bosses_label = QLabel("Encounters:")
        bosses_label.setStyleSheet("color: #888; font-size: 11px; margin-top: 8px;")
        layout.addWidget(bosses_label)

        self._boss_list = QListWidget()
        self._boss_list.itemChanged.connect(self._emit_filter)
        layout.addWidget(self._boss_list, stretch=1)

        classes_label = QLabel("Classes:")
        classes_label.setStyleSheet("color: #888; font-size: 11px; margin-top: 8px;")
        layout.addWidget(classes_label)

        self._class_list = QListWidget()
        for class_id, name in sorted(CLASS_NAMES.items(), key=lambda kv: kv[1]):
            if class_id == 0:
                continue
            item = QListWidgetItem(name)
            item.setData(Qt.ItemDataRole.UserRole, class_id)
            item.setIcon(QIcon(class_icon_path(class_id)))
            item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
            item.setCheckState(Qt.CheckState.Unchecked)
            self._class_list.addItem(item)
        self._class_list.itemChanged.connect(self._emit_filter)
        layout.addWidget(self._class_list, stretch=1)

        self._reset_btn = QPushButton("Reset Filters")
        self._reset_btn.setEnabled(False)
        self._reset_btn.clicked.connect(self.reset)
        layout.addWidget(self._reset_btn)

    def set_boss_names(self, names: list[str]) -> None:
        """Replace the boss list, keeping checks on names still present."""
        checked = self._checked_values(self._boss_list)

        self._updating = True
        self._boss_list.clear()
        for name in names:
            item = QListWidgetItem(name)
            item.setData(Qt.ItemDataRole.UserRole, name)
            item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
            item.setCheckState(
                Qt.CheckState.Checked if name in checked else Qt.CheckState.Unchecked
            )
            self._boss_list.addItem(item)
        self._updating = False

    def current_filter(self) -> SearchFilter:
        seconds = self._duration_spin.value()
        return SearchFilter(
            min_duration=DEFAULT_MIN_DURATION if seconds < 0 else seconds * 1000,
            bosses=self._checked_values(self._boss_list),
            classes=self._checked_values(self._class_list),
            cleared_only=self._cleared_check.isChecked(),
            favorites_only=self._favorites_check.isChecked(),
        )

    def reset(self) -> None:
        """Return every control to its default."""
        self._updating = True
        self._duration_spin.setValue(-1)
        self._cleared_check.setChecked(False)
        self._favorites_check.setChecked(False)
        for list_widget in (self._boss_list, self._class_list):
            for i in range(list_widget.count()):
                list_widget.item(i).setCheckState(Qt.CheckState.Unchecked)
        self._updating = False
        self._emit_filter()

    def _checked_values(self, list_widget: QListWidget) -> set:
        values = set()
        for i in range(list_widget.count()):
            item = list_widget.item(i)
            if item.checkState() == Qt.CheckState.Checked:
                values.add(item.data(Qt.ItemDataRole.UserRole))
        return values

    def _emit_filter(self, *_args) -> None:
        if self._updating:
            return
        search_filter = self.current_filter()
        self._reset_btn.setEnabled(search_filter.is_active)
        logger.debug(f"Filter changed: {search_filter}")
        self.filter_changed.emit(search_filter)
