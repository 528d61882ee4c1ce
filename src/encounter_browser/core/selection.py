"""Selection state for multi-row actions on the encounter list."""

from typing import Iterable

from PySide6.QtCore import QObject, Signal

from ..utils.logging_config import get_logger

logger = get_logger("selection")


class SelectionManager(QObject):
    """
    Set of checked encounter ids plus the selection-mode toggle.

    The set outlives page changes and re-fetches; ids that are no longer
    visible stay selected. Leaving selection mode only hides the
    checkboxes, callers clear the set explicitly.
    """

    selection_changed = Signal(list)  # sorted list of ids
    selection_mode_changed = Signal(bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._selected: set[int] = set()
        self._selection_mode = False

    @property
    def selection_mode(self) -> bool:
        return self._selection_mode

    def set_selection_mode(self, enabled: bool) -> None:
        if enabled == self._selection_mode:
            return
        self._selection_mode = enabled
        self.selection_mode_changed.emit(enabled)

    def toggle(self, encounter_id: int) -> bool:
        """
        Flip selection of one encounter.

        Returns:
            True if the encounter is selected afterwards
        """
        if encounter_id in self._selected:
            self._selected.discard(encounter_id)
        else:
            self._selected.add(encounter_id)
        self._emit_changed()
        return encounter_id in self._selected

    def set_selected(self, encounter_ids: Iterable[int], selected: bool = True) -> None:
        """Select or deselect several encounters at once."""
        ids = set(encounter_ids)
        before = len(self._selected)
        if selected:
            self._selected |= ids
        else:
            self._selected -= ids
        if len(self._selected) != before:
            self._emit_changed()

    def is_selected(self, encounter_id: int) -> bool:
        return encounter_id in self._selected

    def selected_ids(self) -> tuple[int, ...]:
        return tuple(sorted(self._selected))

    @property
    def count(self) -> int:
        return len(self._selected)

    def clear(self) -> None:
        if not self._selected:
            return
        self._selected.clear()
        self._emit_changed()

    def _emit_changed(self) -> None:
        self.selection_changed.emit(sorted(self._selected))
        logger.debug(f"Selection changed: {len(self._selected)} selected")
