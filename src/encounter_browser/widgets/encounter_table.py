"""
Encounter list widget.

Paginated table of encounter previews driven by ViewSynchronizer:
- Search box (debounced) feeding QueryInputs
- Page navigation bar with "first-last of total" summary
- Selection mode with per-row checkboxes
- Empty-state message when there is nothing to show
"""

from datetime import datetime
from typing import Optional

from PySide6.QtCore import Qt, QAbstractTableModel, QModelIndex, Signal, Slot, QTimer
from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QTableView,
    QHeaderView,
    QLabel,
    QPushButton,
    QLineEdit,
    QStackedWidget,
)

from ..core.classes import CLASS_NAMES, class_name
from ..core.models import EncounterPreview
from ..core.query import MAX_SEARCH_LENGTH
from ..core.selection import SelectionManager
from ..core.view_sync import ViewSynchronizer
from ..utils.logging_config import get_logger

logger = get_logger("encounter_table")


class EncounterTableModel(QAbstractTableModel):
    """
    Table model over the rows of the current page.

    Rows are shown in the order the backend returned them. Column 0 carries
    a checkbox while selection mode is on; check state is read from the
    SelectionManager so it survives page changes.
    """

    COLUMNS = [
        ("Encounter", "boss_name"),
        ("Party", "names"),
        ("Date", "fight_start"),
        ("Duration", "duration"),
        ("★", "favorite"),
    ]

    def __init__(self, selection: SelectionManager, parent=None):
        super().__init__(parent)
        self._selection = selection
        self._rows: tuple[EncounterPreview, ...] = ()

        self._selection.selection_changed.connect(self._on_selection_changed)
        self._selection.selection_mode_changed.connect(self._on_selection_mode_changed)

    def rowCount(self, parent=QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        return len(self.COLUMNS)

    def data(self, index: QModelIndex, role: int):
        if not index.isValid() or index.row() >= len(self._rows):
            return None

        encounter = self._rows[index.row()]
        col = index.column()

        if role == Qt.ItemDataRole.DisplayRole:
            if col == 0:
                return encounter.boss_name
            elif col == 1:
                return ", ".join(encounter.names)
            elif col == 2:
                return datetime.fromtimestamp(encounter.fight_start / 1000).strftime(
                    "%Y-%m-%d %H:%M"
                )
            elif col == 3:
                return encounter.duration_text
            elif col == 4:
                return "★" if encounter.favorite else ""

        elif role == Qt.ItemDataRole.CheckStateRole:
            if col == 0 and self._selection.selection_mode:
                if self._selection.is_selected(encounter.id):
                    return Qt.CheckState.Checked
                return Qt.CheckState.Unchecked

        elif role == Qt.ItemDataRole.ToolTipRole:
            if col == 1:
                return "<br>".join(
                    f"{name} ({class_name(class_id) if class_id in CLASS_NAMES else class_id})"
                    for name, class_id in encounter.participants
                )
            if col == 0 and encounter.cleared is not None:
                return "Cleared" if encounter.cleared else "Wipe"

        elif role == Qt.ItemDataRole.TextAlignmentRole:
            if col in (2, 3, 4):
                return Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
            return Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter

        elif role == Qt.ItemDataRole.UserRole:
            return encounter.id

        return None

    def setData(self, index: QModelIndex, value, role: int = Qt.ItemDataRole.EditRole) -> bool:
        if (
            not index.isValid()
            or index.column() != 0
            or role != Qt.ItemDataRole.CheckStateRole
            or not self._selection.selection_mode
        ):
            return False

        encounter = self._rows[index.row()]
        checked = Qt.CheckState(value) == Qt.CheckState.Checked
        if checked != self._selection.is_selected(encounter.id):
            self._selection.toggle(encounter.id)
        return True

    def flags(self, index: QModelIndex):
        base = super().flags(index)
        if index.isValid() and index.column() == 0 and self._selection.selection_mode:
            return base | Qt.ItemFlag.ItemIsUserCheckable
        return base

    def headerData(self, section: int, orientation: Qt.Orientation, role: int):
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            return self.COLUMNS[section][0]
        return None

    def set_rows(self, rows: tuple[EncounterPreview, ...]) -> None:
        self.beginResetModel()
        self._rows = tuple(rows)
        self.endResetModel()

    def get_encounter(self, row: int) -> Optional[EncounterPreview]:
        if 0 <= row < len(self._rows):
            return self._rows[row]
        return None

    @property
    def row_ids(self) -> list[int]:
        return [encounter.id for encounter in self._rows]

    def _refresh_check_column(self) -> None:
        if not self._rows:
            return
        top = self.index(0, 0)
        bottom = self.index(len(self._rows) - 1, 0)
        self.dataChanged.emit(top, bottom, [Qt.ItemDataRole.CheckStateRole])

    def _on_selection_changed(self, _ids: list) -> None:
        self._refresh_check_column()

    def _on_selection_mode_changed(self, _enabled: bool) -> None:
        # Flags change with the mode, so rebuild the view
        self.beginResetModel()
        self.endResetModel()


class PaginationBar(QWidget):
    """First/previous/next/last buttons with the row summary."""

    def __init__(self, view: ViewSynchronizer, parent=None):
        super().__init__(parent)
        self._view = view

        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)
        layout.setSpacing(4)

        self._summary_label = QLabel()
        self._summary_label.setStyleSheet("color: #888; font-size: 11px;")
        layout.addWidget(self._summary_label)
        layout.addStretch()

        self._first_btn = QPushButton("⏮")
        self._first_btn.setToolTip("First page")
        self._first_btn.clicked.connect(self._view.first)
        layout.addWidget(self._first_btn)

        self._prev_btn = QPushButton("◀")
        self._prev_btn.setToolTip("Previous page")
        self._prev_btn.clicked.connect(self._view.previous)
        layout.addWidget(self._prev_btn)

        self._page_label = QLabel()
        self._page_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._page_label.setMinimumWidth(90)
        layout.addWidget(self._page_label)

        self._next_btn = QPushButton("▶")
        self._next_btn.setToolTip("Next page")
        self._next_btn.clicked.connect(self._view.next)
        layout.addWidget(self._next_btn)

        self._last_btn = QPushButton("⏭")
        self._last_btn.setToolTip("Last page")
        self._last_btn.clicked.connect(self._view.last)
        layout.addWidget(self._last_btn)

        self.update_state()

    def update_state(self) -> None:
        self._summary_label.setText(self._view.summary())
        self._page_label.setText(self._view.page_label())

        nav = self._view.navigation_state()
        self._first_btn.setEnabled(nav.can_first)
        self._prev_btn.setEnabled(nav.can_previous)
        self._next_btn.setEnabled(nav.can_next)
        self._last_btn.setEnabled(nav.can_last)


class EncounterTableWidget(QWidget):
    """
    Widget containing the encounter table, search box and pagination bar.

    Search typing is debounced before it reaches the query inputs; all other
    controls act immediately.
    """

    favorite_toggle_requested = Signal(int, bool)  # encounter id, new state
    delete_requested = Signal(list)  # selected encounter ids

    SEARCH_DEBOUNCE_MS = 200

    def __init__(self, view: ViewSynchronizer, selection: SelectionManager, parent=None):
        super().__init__(parent)

        self._view = view
        self._selection = selection
        self._inputs = view.inputs
        self._model = EncounterTableModel(selection, self)

        self._search_timer = QTimer(self)
        self._search_timer.setSingleShot(True)
        self._search_timer.setInterval(self.SEARCH_DEBOUNCE_MS)
        self._search_timer.timeout.connect(self._apply_search)

        self._setup_ui()

        self._view.view_changed.connect(self._on_view_changed)
        self._view.scroll_to_row_requested.connect(self._scroll_to_row)
        self._selection.selection_changed.connect(self._update_selection_controls)
        self._selection.selection_mode_changed.connect(self._on_selection_mode_changed)

        self._on_view_changed()
        self._on_selection_mode_changed(self._selection.selection_mode)

    def _setup_ui(self) -> None:
        """Initialize UI components."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        # Toolbar
        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(8, 8, 8, 8)
        toolbar.setSpacing(8)

        self._search_input = QLineEdit()
        self._search_input.setPlaceholderText("🔍 Search encounters or players...")
        self._search_input.setClearButtonEnabled(True)
        self._search_input.setMaxLength(MAX_SEARCH_LENGTH)
        self._search_input.textChanged.connect(self._on_search_text_edited)
        toolbar.addWidget(self._search_input, stretch=1)

        self._select_mode_btn = QPushButton("☑ Select")
        self._select_mode_btn.setCheckable(True)
        self._select_mode_btn.toggled.connect(self._selection.set_selection_mode)
        toolbar.addWidget(self._select_mode_btn)

        self._select_page_btn = QPushButton("Select Page")
        self._select_page_btn.clicked.connect(self._on_select_page_clicked)
        toolbar.addWidget(self._select_page_btn)

        self._clear_selection_btn = QPushButton("Clear Selection")
        self._clear_selection_btn.clicked.connect(self._selection.clear)
        toolbar.addWidget(self._clear_selection_btn)

        self._delete_btn = QPushButton("🗑️ Delete")
        self._delete_btn.clicked.connect(self._on_delete_clicked)
        toolbar.addWidget(self._delete_btn)

        layout.addLayout(toolbar)

        # Table or empty-state message
        self._stack = QStackedWidget()

        self._table = QTableView()
        self._table.setModel(self._model)
        self._table.setAlternatingRowColors(True)
        self._table.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QTableView.SelectionMode.SingleSelection)
        self._table.verticalHeader().setVisible(False)
        self._table.setShowGrid(False)

        header = self._table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(3, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(4, QHeaderView.ResizeMode.ResizeToContents)

        self._table.doubleClicked.connect(self._on_row_activated)
        self._stack.addWidget(self._table)

        empty = QWidget()
        empty_layout = QVBoxLayout(empty)
        empty_layout.addStretch()
        self._empty_label = QLabel()
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._empty_label.setStyleSheet("font-size: 14px;")
        empty_layout.addWidget(self._empty_label)
        self._empty_hint = QLabel()
        self._empty_hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._empty_hint.setStyleSheet("color: #888; font-size: 11px;")
        empty_layout.addWidget(self._empty_hint)
        empty_layout.addStretch()
        self._stack.addWidget(empty)

        layout.addWidget(self._stack, stretch=1)

        self._pagination = PaginationBar(self._view)
        layout.addWidget(self._pagination)

    def _on_search_text_edited(self, _text: str) -> None:
        self._search_timer.start()

    def _apply_search(self) -> None:
        self._inputs.set_search_text(self._search_input.text())

    @Slot()
    def _on_view_changed(self) -> None:
        self._model.set_rows(self._view.rows)

        empty_state = self._view.empty_state()
        if empty_state is None:
            self._stack.setCurrentIndex(0)
        else:
            self._empty_label.setText(empty_state.message)
            self._empty_hint.setText(empty_state.hint)
            self._empty_hint.setVisible(bool(empty_state.hint))
            self._stack.setCurrentIndex(1)

        self._pagination.update_state()

    @Slot(int)
    def _scroll_to_row(self, row: int) -> None:
        index = self._model.index(row, 0)
        if index.isValid():
            self._table.scrollTo(index, QTableView.ScrollHint.PositionAtTop)

    def _on_selection_mode_changed(self, enabled: bool) -> None:
        self._select_mode_btn.blockSignals(True)
        self._select_mode_btn.setChecked(enabled)
        self._select_mode_btn.blockSignals(False)
        self._select_page_btn.setVisible(enabled)
        self._clear_selection_btn.setVisible(enabled)
        self._delete_btn.setVisible(enabled)
        self._update_selection_controls()

    def _update_selection_controls(self, *_args) -> None:
        count = self._selection.count
        self._delete_btn.setEnabled(count > 0)
        self._clear_selection_btn.setEnabled(count > 0)
        self._delete_btn.setText(f"🗑️ Delete ({count})" if count else "🗑️ Delete")

    def _on_select_page_clicked(self) -> None:
        self._selection.set_selected(self._model.row_ids, True)

    def _on_delete_clicked(self) -> None:
        ids = list(self._selection.selected_ids())
        if ids:
            self.delete_requested.emit(ids)

    def _on_row_activated(self, index: QModelIndex) -> None:
        """Double-click on the star column toggles the favorite flag."""
        encounter = self._model.get_encounter(index.row())
        if encounter and index.column() == 4:
            self.favorite_toggle_requested.emit(encounter.id, not encounter.favorite)

    @property
    def model(self) -> EncounterTableModel:
        return self._model
