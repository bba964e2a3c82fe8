"""The reference-aware message composer.

The composer owns a Document and a cursor. Every edit re-derives the
canonical string for `on_change` and re-runs trigger detection, which opens,
updates or closes the command and mention menus. Rendering is left to the
host, which reads `document`, `cursor`, `command_menu` and `mention_menu`.
"""

import logging
from datetime import date
from typing import Callable

from refchat.composer.inserter import apply_template, expand_template, insert_reference
from refchat.config import settings
from refchat.domain.document import Document, ReferenceToken
from refchat.domain.search import SearchResult
from refchat.domain.template import PromptTemplate
from refchat.graph.base import PreviewResolver, SearchProvider, TemplateCatalog
from refchat.menus.controller import MenuController, MenuPosition
from refchat.search.cache import SearchCache
from refchat.search.debouncer import Debouncer
from refchat.search.pipeline import SearchPipeline
from refchat.serialization.preview import format_block_preview
from refchat.serialization.references import deserialize, serialize
from refchat.templates.catalog import BUILTIN_TEMPLATES, filter_templates
from refchat.triggers.detector import INACTIVE, TriggerContext, detect_trigger

logger = logging.getLogger(__name__)


class Composer:
    """Single-user editing surface with "/" command and "@" mention menus."""

    def __init__(
        self,
        *,
        resolver: PreviewResolver,
        search_provider: SearchProvider,
        template_catalog: TemplateCatalog | None = None,
        on_change: Callable[[str], None] | None = None,
        on_send: Callable[[Document], None] | None = None,
        on_template_select: Callable[[str, str], None] | None = None,
        on_focus: Callable[[], None] | None = None,
        menu_position: Callable[[], MenuPosition] | None = None,
        search_cache: SearchCache | None = None,
        debounce_seconds: float | None = None,
        search_limit: int | None = None,
        separator: str | None = None,
        preview_length: int | None = None,
        template_autosend: bool | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the composer.

        Args:
            resolver: Resolves block uids to previews when loading and dropping blocks
            search_provider: Backs the "@" mention search
            template_catalog: Backs the "/" command menu; built-in templates if omitted
            on_change: Receives the canonical string after every committed edit
            on_send: Receives a snapshot of the document when the message is sent
            on_template_select: Receives (template id, expanded prompt)
            on_focus: Called when the editor should regain focus
            menu_position: Host layout callback, asked once when a menu opens
            search_cache: Session-wide result cache to share between composers
            debounce_seconds: Quiet period before a search is issued
            search_limit: Maximum number of search results
            separator: Text inserted after a reference token
            preview_length: Maximum block preview length
            template_autosend: Send right after a template is selected
            today: Source of the date used to expand templates
        """
        self.resolver = resolver
        self.template_catalog = template_catalog
        self.on_change = on_change
        self.on_send = on_send
        self.on_template_select = on_template_select
        self.on_focus = on_focus
        self.menu_position = menu_position
        self.separator = settings.reference_separator if separator is None else separator
        self.preview_length = (
            settings.block_preview_length if preview_length is None else preview_length
        )
        self.template_autosend = (
            settings.template_autosend if template_autosend is None else template_autosend
        )
        self.today = today

        self.document = Document()
        self.cursor = 0
        self.trigger: TriggerContext = INACTIVE
        self.focused = False
        self.disabled = False
        self.search_loading = False

        self.command_menu: MenuController[PromptTemplate] = MenuController("command")
        self.mention_menu: MenuController[SearchResult] = MenuController("mention")
        self.search = SearchPipeline(
            search_provider,
            cache=search_cache,
            debouncer=Debouncer(
                settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
            ),
            limit=search_limit,
            on_results=self._on_search_results,
            on_loading=self._on_search_loading,
        )

        self._mention_query: str | None = None
        self._composing = False
        self._loading = False

    # Content

    @property
    def value(self) -> str:
        """The canonical string of the current document."""
        return serialize(self.document)

    @property
    def can_send(self) -> bool:
        if self.disabled:
            return False
        return self.document.has_text() or self.document.has_references()

    async def load(self, canonical: str) -> None:
        """Replace the content with a canonical string, resolving block previews."""
        self._loading = True
        try:
            document = await deserialize(canonical, self.resolver, self.preview_length)
        finally:
            self._loading = False
        self.document = document
        self.cursor = document.length
        self._refresh_trigger()

    async def set_value(self, canonical: str) -> None:
        """Load a controlled value unless it already matches the content."""
        if canonical != self.value:
            await self.load(canonical)

    # Editing

    def insert_text(self, text: str) -> None:
        self.cursor = self.document.insert_text(self.cursor, text)
        self._after_mutation()

    def delete_backward(self) -> None:
        """Delete the character or the whole reference token before the cursor."""
        if self.cursor == 0:
            return
        self.cursor = self.document.delete(self.cursor - 1, self.cursor)
        self._after_mutation()

    def delete_forward(self) -> None:
        if self.cursor >= self.document.length:
            return
        self.document.delete(self.cursor, self.cursor + 1)
        self._after_mutation()

    def set_cursor(self, offset: int) -> None:
        self.cursor = max(0, min(offset, self.document.length))
        self._refresh_trigger()

    def clear(self) -> None:
        self.document = Document()
        self.cursor = 0
        self._after_mutation()

    def insert_block_reference(self, uid: str, preview: str, offset: int | None = None) -> None:
        """Insert a block token plus separator at `offset` (default: the cursor)."""
        if offset is not None:
            self.cursor = max(0, min(offset, self.document.length))
        token = ReferenceToken(kind="block", id=uid, preview_text=preview)
        self.cursor = self.document.replace(self.cursor, self.cursor, [token, self.separator])
        self._restore_focus()
        self._after_mutation()

    async def drop_block(self, uid: str, offset: int | None = None) -> bool:
        """Insert a dropped block, looking up its preview first.

        Returns:
            False if the block could not be resolved; nothing is inserted then
        """
        try:
            preview = await self.resolver.resolve_reference_preview(uid)
        except Exception as e:
            logger.error(f"Error handling block drop for {uid}: {e}")
            return False
        if preview is None:
            logger.error(f"Could not fetch block data for: {uid}")
            return False

        self.insert_block_reference(
            uid, format_block_preview(preview.text, self.preview_length), offset
        )
        return True

    def begin_composition(self) -> None:
        """IME composition started; change notifications wait until it ends."""
        self._composing = True

    def end_composition(self) -> None:
        self._composing = False
        self._emit_change()

    # Keyboard and pointer

    def handle_key(self, key: str, shift: bool = False) -> bool:
        """Route a key press; returns True if the composer consumed it."""
        if self.mention_menu.is_open and (self.mention_menu.items or key == "Escape"):
            if key == "ArrowDown":
                self.mention_menu.highlight_next()
                return True
            if key == "ArrowUp":
                self.mention_menu.highlight_previous()
                return True
            if key == "Enter":
                self._commit_mention(self.mention_menu.highlighted_index)
                return True
            if key == "Escape":
                self._close_mention_menu()
                return True

        if self.command_menu.is_open:
            if key == "ArrowDown":
                self.command_menu.highlight_next()
                return True
            if key == "ArrowUp":
                self.command_menu.highlight_previous()
                return True
            if key == "Enter":
                self._commit_command(self.command_menu.highlighted_index)
                return True
            if key == "Escape":
                self.command_menu.close()
                return True

        if key == "Enter" and not shift and not self._composing:
            self.send()
            return True
        return False

    def select(self, index: int) -> bool:
        """Pointer selection of an option in whichever menu is open."""
        if self.mention_menu.is_open:
            return self._commit_mention(index)
        if self.command_menu.is_open:
            return self._commit_command(index)
        return False

    def close_menus(self) -> None:
        self._close_mention_menu()
        self.command_menu.close()

    def send(self) -> bool:
        """Hand a snapshot of the document to `on_send` and clear the composer."""
        if not self.can_send:
            return False

        snapshot = self.document.model_copy(deep=True)
        self.close_menus()
        if self.on_send:
            self.on_send(snapshot)

        self.document = Document()
        self.cursor = 0
        self.trigger = INACTIVE
        self._emit_change()
        return True

    # Internals

    def _after_mutation(self) -> None:
        self._emit_change()
        self._refresh_trigger()

    def _emit_change(self) -> None:
        if self._composing or self._loading or not self.on_change:
            return
        self.on_change(serialize(self.document))

    def _refresh_trigger(self) -> None:
        trigger = detect_trigger(self.document.plain_text(), self.cursor)
        self.trigger = trigger

        if trigger.active and trigger.kind == "slash":
            self._close_mention_menu()
            if self.command_menu.is_open:
                self.command_menu.retarget(trigger)
            else:
                self.command_menu.open(trigger, self._menu_position())
            self.command_menu.set_items(filter_templates(self._templates(), trigger.filter_text))
        elif trigger.active and trigger.kind == "at":
            self.command_menu.close()
            opening = not self.mention_menu.is_open
            if opening:
                self.mention_menu.open(trigger, self._menu_position())
            else:
                self.mention_menu.retarget(trigger)
            if opening or trigger.query != self._mention_query:
                self._mention_query = trigger.query
                self.search.request(trigger.query)
        else:
            self._close_mention_menu()
            self.command_menu.close()

    def _commit_mention(self, index: int) -> bool:
        origin = self.mention_menu.origin_trigger
        result = self.mention_menu.select(index)
        if result is None or origin is None:
            return False
        self.search.reset()
        self._mention_query = None

        outcome = insert_reference(self.document, origin, result, self.cursor, self.separator)
        if not outcome.applied:
            return False
        self.cursor = outcome.cursor
        self._restore_focus()
        self._after_mutation()
        return True

    def _commit_command(self, index: int) -> bool:
        origin = self.command_menu.origin_trigger
        template = self.command_menu.select(index)
        if template is None or origin is None:
            return False

        today = self.today()
        outcome = apply_template(self.document, origin, template, self.cursor, today)
        if not outcome.applied:
            return False
        self.cursor = outcome.cursor

        if self.on_template_select:
            self.on_template_select(template.id, expand_template(template, today))
        if not (self.template_autosend and self.send()):
            self._restore_focus()
            self._after_mutation()
        return True

    def _close_mention_menu(self) -> None:
        if self.mention_menu.is_open:
            self.mention_menu.close()
        self.search.reset()
        self._mention_query = None

    def _on_search_results(self, filter_text: str, results: list[SearchResult]) -> None:
        self.mention_menu.set_items(results, filter_text)

    def _on_search_loading(self, loading: bool) -> None:
        self.search_loading = loading

    def _templates(self) -> list[PromptTemplate]:
        if self.template_catalog is None:
            return list(BUILTIN_TEMPLATES)
        try:
            return self.template_catalog.templates()
        except Exception as e:
            logger.error(f"Failed to load templates: {e}")
            return list(BUILTIN_TEMPLATES)

    def _menu_position(self) -> MenuPosition:
        if self.menu_position is None:
            return MenuPosition()
        return self.menu_position()

    def _restore_focus(self) -> None:
        self.focused = True
        if self.on_focus:
            self.on_focus()
