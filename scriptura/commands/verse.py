# scriptura/commands/verse.py
"""
/verse search and /verse daily.
"""

import asyncio
import logging
from typing import Optional

import discord
from discord import app_commands

from scriptura.services.pagination import Pager
from scriptura.services.presenter import (
    GENERIC_ERROR,
    NO_RESULTS,
    PAGE_SIZE,
    build_passage_record,
    build_search_page,
)
from scriptura.services.references import (
    Backend,
    CancelToken,
    Empty,
    Failure,
    FailureKind,
    Passage,
    ResolveOptions,
    SearchSet,
    backend_for,
    daily_reference,
    is_valid_translation,
    resolve_translation,
    unhandled_result,
)

from .common import (
    ALLOWED_CONTEXTS,
    ALLOWED_INSTALLS,
    TRANSLATION_OPTION_CHOICES,
    passage_embed,
    search_embed,
    send_error,
)
from .views import SearchPagerView

logger = logging.getLogger(__name__)


def _backend_hint(translation: str, what: str = "request") -> str:
    name = "ESV" if backend_for(translation) == Backend.ESV else "api.bible"
    return f"{name} {what} failed."


class VerseCommands(app_commands.Group):
    """Get Bible verses or search for phrases."""

    def __init__(self, bot):
        super().__init__(
            name="verse",
            description="Get Bible verses or search for phrases",
            allowed_contexts=ALLOWED_CONTEXTS,
            allowed_installs=ALLOWED_INSTALLS,
        )
        self.bot = bot

    @app_commands.command(name="search", description="Search for a verse or phrase")
    @app_commands.describe(
        query="A Bible reference (e.g., John 3:16) or a phrase (e.g., in love)",
        translation="Bible translation to use",
    )
    @app_commands.choices(translation=TRANSLATION_OPTION_CHOICES)
    async def search(
        self,
        interaction: discord.Interaction,
        query: str,
        translation: Optional[app_commands.Choice[str]] = None,
    ):
        await self.lookup(interaction, query, translation.value if translation else None)

    @app_commands.command(name="daily", description="Get the daily verse")
    @app_commands.describe(translation="Bible translation to use")
    @app_commands.choices(translation=TRANSLATION_OPTION_CHOICES)
    async def daily(
        self,
        interaction: discord.Interaction,
        translation: Optional[app_commands.Choice[str]] = None,
    ):
        reference = daily_reference(self.bot.daily_verses)
        await self.lookup(interaction, reference, translation.value if translation else None)

    async def lookup(self, interaction: discord.Interaction, query: str, requested: Optional[str]):
        """Resolve a query for the invoking user and reply."""
        query = (query or "").strip()
        if not query:
            await send_error(interaction, "Please provide a reference or phrase.",
                             hint="Try /verse search with a reference or phrase.")
            return

        if requested and not is_valid_translation(requested):
            await send_error(interaction, f"Unsupported translation: {requested}.", translation=requested)
            return

        user_id = str(interaction.user.id)
        store = self.bot.store
        preferred = await asyncio.to_thread(store.get_preferred_translation, user_id)
        display = await asyncio.to_thread(store.get_display_preferences, user_id)
        translation = resolve_translation(requested, preferred)

        await interaction.response.defer(thinking=True)

        result = await asyncio.to_thread(
            self.bot.resolver.resolve,
            translation,
            query,
            ResolveOptions.from_preferences(display),
        )

        if isinstance(result, Failure):
            logger.warning(f"Lookup failed for {query!r} ({translation}): [{result.kind.value}] {result.message}")
            if result.kind == FailureKind.UNSUPPORTED_TRANSLATION:
                await send_error(interaction, f"Unsupported translation: {translation}.", translation=translation)
            else:
                await send_error(interaction, GENERIC_ERROR, query=query, translation=translation,
                                 hint=_backend_hint(translation))
        elif isinstance(result, Empty):
            await send_error(interaction, NO_RESULTS, query=query, translation=translation)
        elif isinstance(result, Passage):
            await self._send_passage(interaction, result, query, translation)
        elif isinstance(result, SearchSet):
            await self._send_search(interaction, query, translation, result)
        else:
            raise unhandled_result(result)

    async def _send_passage(self, interaction, passage: Passage, query: str, translation: str):
        if not passage.text:
            await send_error(interaction, "Verse found, but could not parse passage content.",
                             query=query, translation=translation, hint="Try a different translation.")
            return
        record = build_passage_record(passage, translation)
        await interaction.followup.send(embed=passage_embed(record))

    async def _send_search(self, interaction, query: str, translation: str, first: SearchSet):
        resolver = self.bot.resolver
        cancel = CancelToken()

        async def fetch_page(page: int):
            return await asyncio.to_thread(
                resolver.fetch_search_page, translation, query, page, PAGE_SIZE, cancel
            )

        def render(pager: Pager) -> discord.Embed:
            record = build_search_page(pager.current, translation, pager.page, PAGE_SIZE, pager.total_pages)
            return search_embed(record)

        error_details = dict(query=query, translation=translation,
                             hint=_backend_hint(translation, "search request"))

        pager = Pager(fetch_page, page_size=PAGE_SIZE, timeout=self.bot.pagination_timeout)
        first = await pager.start(first)

        if isinstance(first, Failure):
            logger.warning(f"Search failed for {query!r} ({translation}): {first.message}")
            await send_error(interaction, GENERIC_ERROR, **error_details)
            return
        if not pager.started:
            await send_error(interaction, NO_RESULTS, query=query, translation=translation)
            return

        if not pager.needs_controls:
            await interaction.followup.send(embed=render(pager))
            return

        view = SearchPagerView(
            pager,
            owner_id=interaction.user.id,
            render=render,
            error_details=error_details,
            cancel=cancel,
            timeout=self.bot.pagination_timeout,
        )
        view.message = await interaction.followup.send(embed=render(pager), view=view, wait=True)
