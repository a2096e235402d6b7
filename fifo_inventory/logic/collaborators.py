# fifo_inventory/logic/collaborators.py

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

# --- Identity Generator Protocol ---

class IdGenerator(Protocol):
    """Produces a globally unique identifier for every created entity."""
    def new_id(self) -> str:
        ...


class UUIDGenerator:
    """Default identity generator backed by random UUIDs."""
    def new_id(self) -> str:
        return str(uuid.uuid4())

# --- Clock Protocol ---

class Clock(Protocol):
    """Supplies the current timestamp for audit stamps and default dates."""
    def now(self) -> datetime:
        ...


class SystemClock:
    """Default clock reading the system time in UTC."""
    def now(self) -> datetime:
        return datetime.now(timezone.utc)

# --- Change Notifier Protocol ---

class ChangeNotifier(Protocol):
    """
    Sink signalled once after every successful mutating operation so observers
    can refresh derived views. Carries no payload.
    """
    def notify_changed(self) -> None:
        ...


class LoggingChangeNotifier:
    """Default notifier: records the signal in the debug log only."""
    def notify_changed(self) -> None:
        logger.debug("Inventory state changed.")


class CallbackChangeNotifier:
    """Adapts any zero-argument callable (e.g. an event bus emit) to the notifier protocol."""
    def __init__(self, callback: Callable[[], None]):
        self._callback = callback

    def notify_changed(self) -> None:
        self._callback()
