"""Write events raised by the content store.

The bus is synchronous: ``publish`` returns only after every subscriber has
run, so a write that publishes an event is complete only once dependent
caches have been invalidated. Subscriber exceptions propagate to the writer.
"""

from enum import Enum
from typing import Callable, List

from pydantic import BaseModel, ConfigDict, Field

from blogcache.logging_config import get_logger

logger = get_logger(name=__name__)


class WriteEventKind(str, Enum):
    CATEGORY_EDIT = "category-edit"
    RECORD_SAVE = "record-save"


class WriteEvent(BaseModel):
    """Notification that the content store changed."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    kind: WriteEventKind
    is_autosave: bool = Field(default=False, alias="isAutosave")

    @classmethod
    def category_edit(cls) -> "WriteEvent":
        return cls(kind=WriteEventKind.CATEGORY_EDIT)

    @classmethod
    def record_save(cls, is_autosave: bool = False) -> "WriteEvent":
        return cls(kind=WriteEventKind.RECORD_SAVE, is_autosave=is_autosave)


WriteEventHandler = Callable[[WriteEvent], object]


class WriteEventBus:
    """In-process fan-out of write events to registered handlers."""

    def __init__(self):
        self._handlers: List[WriteEventHandler] = []

    def subscribe(self, handler: WriteEventHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: WriteEventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def publish(self, event: WriteEvent) -> List[object]:
        """Run every handler and return their results in subscription order."""
        logger.debug(
            "Publishing {} (autosave={}) to {} handlers",
            event.kind.value,
            event.is_autosave,
            len(self._handlers),
        )
        return [handler(event) for handler in list(self._handlers)]
