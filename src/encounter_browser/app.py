"""
Main Application Window for the Encounter Browser.

Integrates all widgets and coordinates:
- Query inputs, controller and view synchronizer wiring
- Fetch worker lifecycle
- Delete / favorite actions against the encounter store
- Interface-changed notification
"""

from typing import Optional

from PySide6.QtCore import Qt, Slot
from PySide6.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QSplitter,
    QStatusBar,
    QLabel,
    QMessageBox,
)
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtNetwork import QNetworkInformation

from .core import (
    AppSettings,
    EncounterStore,
    FetchState,
    QueryInputs,
    ReactiveQueryController,
    SearchFilter,
    SelectionManager,
    ViewSynchronizer,
    get_interface_relay,
)
from .workers.fetch_worker import ThreadedFetcher
from .widgets.encounter_table import EncounterTableWidget
from .widgets.filter_panel import FilterPanel
from .widgets.interface_banner import InterfaceChangedBanner
from .utils.logging_config import get_logger

logger = get_logger("app")


class MainWindow(QMainWindow):
    """
    Main application window.

    Layout:
    - Top: interface-changed banner (hidden until raised)
    - Left: filter panel
    - Right: search box, encounter table and pagination bar
    - Bottom: status bar with fetch state and selection count
    """

    def __init__(self, store: EncounterStore, settings: Optional[AppSettings] = None):
        super().__init__()

        self._store = store
        self._settings = settings or AppSettings()
        self._relay = get_interface_relay()

        # Core
        self._inputs = QueryInputs(self)
        self._fetcher = ThreadedFetcher(self._store.load_query, self)
        self._controller = ReactiveQueryController(
            self._inputs,
            self._fetcher,
            default_min_duration=lambda: self._settings.default_min_duration,
            parent=self,
        )
        self._selection = SelectionManager(self)
        self._view = ViewSynchronizer(self._controller, self)

        self._setup_ui()
        self._setup_menu()
        self._setup_statusbar()
        self._connect_signals()
        self._watch_network_interface()

        self._filter_panel.set_boss_names(self._store.get_boss_names())
        self._controller.refresh()

        logger.info("Main window initialized")

    def _setup_ui(self) -> None:
        """Initialize the main UI layout."""
        self.setWindowTitle("Encounter Browser")
        self.setMinimumSize(1000, 640)

        central = QWidget()
        self.setCentralWidget(central)

        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(4, 4, 4, 4)
        main_layout.setSpacing(4)

        self._banner = InterfaceChangedBanner(self._relay)
        main_layout.addWidget(self._banner)

        self._splitter = QSplitter(Qt.Orientation.Horizontal)

        self._filter_panel = FilterPanel()
        self._filter_panel.setMinimumWidth(200)
        self._filter_panel.setMaximumWidth(300)
        self._splitter.addWidget(self._filter_panel)

        self._encounter_table = EncounterTableWidget(self._view, self._selection)
        self._splitter.addWidget(self._encounter_table)
        self._splitter.setSizes([220, 780])

        main_layout.addWidget(self._splitter)

    def _setup_menu(self) -> None:
        """Setup application menu bar."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")

        self._refresh_action = QAction("&Refresh", self)
        self._refresh_action.setShortcut(QKeySequence("F5"))
        self._refresh_action.triggered.connect(self._on_refresh)
        file_menu.addAction(self._refresh_action)

        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence("Ctrl+Q"))
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        view_menu = menubar.addMenu("&View")

        self._selection_mode_action = QAction("&Selection Mode", self)
        self._selection_mode_action.setCheckable(True)
        self._selection_mode_action.setShortcut(QKeySequence("Ctrl+S"))
        self._selection_mode_action.toggled.connect(self._selection.set_selection_mode)
        view_menu.addAction(self._selection_mode_action)

        nav_menu = menubar.addMenu("&Go")
        for text, shortcut, slot in (
            ("&First Page", "Ctrl+Home", self._view.first),
            ("&Previous Page", "Ctrl+Left", self._view.previous),
            ("&Next Page", "Ctrl+Right", self._view.next),
            ("&Last Page", "Ctrl+End", self._view.last),
        ):
            action = QAction(text, self)
            action.setShortcut(QKeySequence(shortcut))
            action.triggered.connect(slot)
            nav_menu.addAction(action)

    def _setup_statusbar(self) -> None:
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)

        self._status_message = QLabel("Ready")
        self._statusbar.addWidget(self._status_message, stretch=1)

        self._selection_label = QLabel("")
        self._statusbar.addPermanentWidget(self._selection_label)

        self._total_label = QLabel("Encounters: 0")
        self._statusbar.addPermanentWidget(self._total_label)

    def _connect_signals(self) -> None:
        """Connect widget signals."""
        self._filter_panel.filter_changed.connect(self._on_filter_changed)

        self._controller.state_changed.connect(self._on_fetch_state_changed)
        self._controller.fetch_failed.connect(self._on_fetch_failed)
        self._view.view_changed.connect(self._on_view_changed)

        self._selection.selection_changed.connect(self._on_selection_changed)
        self._selection.selection_mode_changed.connect(self._on_selection_mode_changed)

        self._encounter_table.delete_requested.connect(self._on_delete_requested)
        self._encounter_table.favorite_toggle_requested.connect(self._on_favorite_toggle)

    def _watch_network_interface(self) -> None:
        """Forward transport changes reported by Qt to the interface relay."""
        if not QNetworkInformation.loadDefaultBackend():
            logger.info("No network information backend, interface changes not watched")
            return

        info = QNetworkInformation.instance()
        info.transportMediumChanged.connect(self._on_transport_medium_changed)

    @Slot(object)
    def _on_transport_medium_changed(self, medium) -> None:
        logger.info(f"Transport medium changed: {medium}")
        self._relay.notify_interface_changed()

    # ================== Query ==================

    @Slot(object)
    def _on_filter_changed(self, search_filter: SearchFilter) -> None:
        self._inputs.set_filter(search_filter)

    def _on_refresh(self) -> None:
        self._filter_panel.set_boss_names(self._store.get_boss_names())
        self._controller.refresh()

    @Slot(object)
    def _on_fetch_state_changed(self, state: FetchState) -> None:
        if state is FetchState.FETCHING:
            self._status_message.setText("Loading encounters...")
        else:
            self._status_message.setText("Ready")

    @Slot(str)
    def _on_fetch_failed(self, error: str) -> None:
        """Keep showing the previous page and report the failure."""
        self._status_message.setText(f"Error: {error}")
        QMessageBox.warning(
            self,
            "Failed to Load Encounters",
            f"Encounters could not be loaded:\n{error}",
        )

    @Slot()
    def _on_view_changed(self) -> None:
        self._total_label.setText(f"Encounters: {self._view.total_encounters:,}")

    # ================== Selection ==================

    @Slot(list)
    def _on_selection_changed(self, ids: list) -> None:
        self._selection_label.setText(f"{len(ids)} selected" if ids else "")

    @Slot(bool)
    def _on_selection_mode_changed(self, enabled: bool) -> None:
        self._selection_mode_action.blockSignals(True)
        self._selection_mode_action.setChecked(enabled)
        self._selection_mode_action.blockSignals(False)

    @Slot(list)
    def _on_delete_requested(self, ids: list) -> None:
        reply = QMessageBox.question(
            self,
            "Delete Encounters",
            f"Delete {len(ids)} selected encounter{'s' if len(ids) != 1 else ''}?",
        )
        if reply != QMessageBox.StandardButton.Yes:
            return

        deleted = self._store.delete_encounters(ids)
        self._selection.clear()
        self._status_message.setText(f"Deleted {deleted} encounters")
        self._on_refresh()

    @Slot(int, bool)
    def _on_favorite_toggle(self, encounter_id: int, favorite: bool) -> None:
        self._store.set_favorite(encounter_id, favorite)
        self._controller.refresh()

    # ================== Cleanup ==================

    def closeEvent(self, event) -> None:
        """Handle application close."""
        self._fetcher.shutdown()
        logger.info("Application closing")
        super().closeEvent(event)
