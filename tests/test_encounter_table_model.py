import unittest
import sys
from pathlib import Path

# Add src to path to allow imports
sys.path.append(str(Path(__file__).parent.parent / "src"))

from PySide6.QtCore import Qt

from fakes import ensure_app, make_page

from encounter_browser.core.selection import SelectionManager
from encounter_browser.widgets.encounter_table import EncounterTableModel


class TestEncounterTableModel(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = ensure_app()

    def setUp(self):
        self.selection = SelectionManager()
        self.model = EncounterTableModel(self.selection)
        self.model.set_rows(make_page(1, 3).encounters)

    def test_rows_in_backend_order(self):
        self.assertEqual(self.model.rowCount(), 3)
        self.assertEqual(self.model.row_ids, [3, 2, 1])
        self.assertEqual(self.model.get_encounter(0).id, 3)
        self.assertIsNone(self.model.get_encounter(5))

    def test_display(self):
        self.assertEqual(
            self.model.data(self.model.index(0, 0), Qt.ItemDataRole.DisplayRole), "Valtan"
        )
        self.assertEqual(
            self.model.data(self.model.index(0, 1), Qt.ItemDataRole.DisplayRole),
            "Aerith, Bastion",
        )
        self.assertEqual(
            self.model.data(self.model.index(1, 0), Qt.ItemDataRole.UserRole), 2
        )

    def test_no_checkbox_outside_selection_mode(self):
        index = self.model.index(0, 0)
        self.assertIsNone(self.model.data(index, Qt.ItemDataRole.CheckStateRole))
        self.assertFalse(
            self.model.setData(index, Qt.CheckState.Checked, Qt.ItemDataRole.CheckStateRole)
        )
        self.assertEqual(self.selection.count, 0)

    def test_checkbox_toggles_selection(self):
        self.selection.set_selection_mode(True)
        index = self.model.index(1, 0)

        self.assertEqual(
            self.model.data(index, Qt.ItemDataRole.CheckStateRole), Qt.CheckState.Unchecked
        )
        self.assertTrue(
            self.model.setData(index, Qt.CheckState.Checked, Qt.ItemDataRole.CheckStateRole)
        )
        self.assertTrue(self.selection.is_selected(2))
        self.assertEqual(
            self.model.data(index, Qt.ItemDataRole.CheckStateRole), Qt.CheckState.Checked
        )

    def test_selection_survives_new_rows(self):
        self.selection.set_selection_mode(True)
        self.selection.toggle(3)

        self.model.set_rows(make_page(2, 13).encounters)
        self.model.set_rows(make_page(1, 3).encounters)

        self.assertEqual(
            self.model.data(self.model.index(0, 0), Qt.ItemDataRole.CheckStateRole),
            Qt.CheckState.Checked,
        )


if __name__ == "__main__":
    unittest.main()
