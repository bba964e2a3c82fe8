"""Open/closed state, options and highlight of a trigger menu."""

import logging
from typing import Generic, Sequence, TypeVar, Union

from pydantic import BaseModel

from refchat.domain.search import SearchResult
from refchat.domain.template import PromptTemplate
from refchat.triggers.detector import TriggerContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MenuPosition(BaseModel):
    """Screen position of a menu, fixed when the menu opens."""

    top: float = 0
    left: float = 0


class MenuState(BaseModel):
    """Snapshot of a menu for rendering."""

    is_open: bool = False
    items: list[Union[SearchResult, PromptTemplate]] = []
    highlighted_index: int = 0
    origin_trigger: TriggerContext | None = None
    position: MenuPosition = MenuPosition()


class MenuController(Generic[T]):
    """State machine with two states, Closed and Open(items, highlighted_index)."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.is_open = False
        self.items: list[T] = []
        self.highlighted_index = 0
        self.origin_trigger: TriggerContext | None = None
        self.position = MenuPosition()

    def open(self, trigger: TriggerContext, position: MenuPosition | None = None) -> None:
        """Closed -> Open([], 0)."""
        self.is_open = True
        self.items = []
        self.highlighted_index = 0
        self.origin_trigger = trigger
        self.position = position or MenuPosition()
        logger.debug(f"Opened {self.name} menu for '{trigger.marker}'")

    def retarget(self, trigger: TriggerContext) -> None:
        """Follow the trigger while its filter text changes; the position stays."""
        if self.is_open:
            self.origin_trigger = trigger

    def set_items(self, items: Sequence[T], filter_text: str | None = None) -> bool:
        """Show new options and highlight the first one.

        Args:
            items: New options
            filter_text: Filter the options were produced for; when given they
                are applied only if it is still the menu's current query

        Returns:
            Whether the options were applied
        """
        if not self.is_open:
            return False
        if (
            filter_text is not None
            and self.origin_trigger is not None
            and filter_text != self.origin_trigger.query
        ):
            logger.debug(f"Ignoring {self.name} items for stale filter '{filter_text}'")
            return False
        self.items = list(items)
        self.highlighted_index = 0
        return True

    def move(self, delta: int) -> None:
        if not self.is_open or not self.items:
            return
        self.highlighted_index = (self.highlighted_index + delta) % len(self.items)

    def highlight_next(self) -> None:
        self.move(1)

    def highlight_previous(self) -> None:
        self.move(-1)

    def highlighted(self) -> T | None:
        if not self.is_open or not self.items:
            return None
        return self.items[self.highlighted_index]

    def select(self, index: int | None = None) -> T | None:
        """Pick an option and close. Selecting nothing leaves the menu as it is."""
        if not self.is_open:
            return None
        index = self.highlighted_index if index is None else index
        if not 0 <= index < len(self.items):
            return None
        item = self.items[index]
        self.close()
        return item

    def close(self) -> None:
        """Open -> Closed, discarding the options."""
        if self.is_open:
            logger.debug(f"Closed {self.name} menu")
        self.is_open = False
        self.items = []
        self.highlighted_index = 0
        self.origin_trigger = None

    def state(self) -> MenuState:
        return MenuState(
            is_open=self.is_open,
            items=list(self.items),  # type: ignore[arg-type]
            highlighted_index=self.highlighted_index,
            origin_trigger=self.origin_trigger,
            position=self.position,
        )
