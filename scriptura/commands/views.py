# scriptura/commands/views.py
"""
Button view driving a Pager for search results.
"""

import logging
from typing import Callable, Optional

import discord

from scriptura.services.pagination import Pager, PagerExpired
from scriptura.services.presenter import GENERIC_ERROR, build_error_message
from scriptura.services.references import CancelToken, Failure

logger = logging.getLogger(__name__)


class SearchPagerView(discord.ui.View):
    """
    Previous/Next buttons bound to one search and one user.

    Only the user who ran the command can page; everyone else gets an
    ephemeral refusal. After the inactivity timeout the buttons are
    disabled and any in-flight fetch is aborted.
    """

    def __init__(
        self,
        pager: Pager,
        owner_id: int,
        render: Callable[[Pager], discord.Embed],
        error_details: dict,
        cancel: Optional[CancelToken] = None,
        timeout: float = 120,
    ):
        super().__init__(timeout=timeout)
        self.pager = pager
        self.owner_id = owner_id
        self.render = render
        self.error_details = error_details
        self.cancel = cancel
        self.message: Optional[discord.Message] = None
        self._sync_buttons()

    def _sync_buttons(self):
        self.prev_button.disabled = not self.pager.has_prev
        self.next_button.disabled = not self.pager.has_next

    def _disable_all(self):
        for child in self.children:
            child.disabled = True

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.owner_id:
            await interaction.response.send_message(
                "Only the person who ran this search can change pages.",
                ephemeral=True,
            )
            return False
        return True

    async def on_timeout(self):
        self.pager.expire()
        if self.cancel is not None:
            self.cancel.cancel()
        self._disable_all()
        if self.message is not None:
            try:
                await self.message.edit(view=self)
            except discord.HTTPException as e:
                logger.debug(f"Could not disable pagination buttons: {e}")

    async def _navigate(self, interaction: discord.Interaction, step: int):
        await interaction.response.defer()

        try:
            result = await (self.pager.next() if step > 0 else self.pager.prev())
        except PagerExpired:
            self.stop()
            await self.on_timeout()
            return

        if isinstance(result, Failure):
            await interaction.followup.send(
                build_error_message(GENERIC_ERROR, **self.error_details),
                ephemeral=True,
            )
            return

        self._sync_buttons()
        await interaction.edit_original_response(embed=self.render(self.pager), view=self)

    @discord.ui.button(label="Previous", style=discord.ButtonStyle.secondary)
    async def prev_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._navigate(interaction, -1)

    @discord.ui.button(label="Next", style=discord.ButtonStyle.secondary)
    async def next_button(self, interaction: discord.Interaction, button: discord.ui.Button):
        await self._navigate(interaction, 1)
