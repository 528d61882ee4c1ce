"""Process-wide "network interface changed" notification."""

from typing import Optional

from PySide6.QtCore import QObject, Signal

from ..utils.logging_config import get_logger

logger = get_logger("interface_relay")

RESTART_MESSAGE = (
    "Network interface change detected. "
    "Please fully restart the application to keep capturing encounters."
)


class InterfaceChangeRelay(QObject):
    """
    Singleton holding the interface-changed flag.

    Set by the capture environment, cleared only when the user dismisses
    the notification. Has no part in the query lifecycle.
    """

    _instance: Optional["InterfaceChangeRelay"] = None

    changed = Signal(bool)

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, "_initialized"):
            return
        super().__init__()
        self._initialized = True
        self._interface_changed = False

    @property
    def interface_changed(self) -> bool:
        return self._interface_changed

    @property
    def message(self) -> str:
        return RESTART_MESSAGE

    def notify_interface_changed(self) -> None:
        """Raise the flag; repeated notifications are ignored."""
        if self._interface_changed:
            return
        logger.warning("Network interface changed, restart required")
        self._interface_changed = True
        self.changed.emit(True)

    def dismiss(self) -> None:
        """Clear the flag after the user acknowledged the notification."""
        if not self._interface_changed:
            return
        self._interface_changed = False
        self.changed.emit(False)


def get_interface_relay() -> InterfaceChangeRelay:
    """Get the global interface relay instance."""
    return InterfaceChangeRelay()
