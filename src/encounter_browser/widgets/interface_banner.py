"""Restart-required banner shown when the network interface changed."""

from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QPushButton

from ..core.interface_relay import InterfaceChangeRelay


class InterfaceChangedBanner(QFrame):
    """
    Warning strip bound to the InterfaceChangeRelay.

    Only the dismiss button hides it; it does not time out.
    """

    def __init__(self, relay: InterfaceChangeRelay, parent=None):
        super().__init__(parent)
        self._relay = relay

        self.setStyleSheet("""
            InterfaceChangedBanner {
                background: #5A1D1D;
                border: 1px solid #BE1100;
                border-radius: 4px;
            }
        """)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)

        self._label = QLabel(f"⚠️ {relay.message}")
        self._label.setWordWrap(True)
        layout.addWidget(self._label, stretch=1)

        self._dismiss_btn = QPushButton("Dismiss")
        self._dismiss_btn.clicked.connect(self._relay.dismiss)
        layout.addWidget(self._dismiss_btn)

        self._relay.changed.connect(self.setVisible)
        self.setVisible(relay.interface_changed)
