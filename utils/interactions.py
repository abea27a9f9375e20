import time

import nextcord

from utils import cooldowns
from utils.players import get_user


async def reply(interaction: nextcord.Interaction, content: str | None = None, *, ephemeral: bool = False, **kwargs):
    """send_message, or followup.send once the interaction was already answered."""
    if interaction.response.is_done():
        return await interaction.followup.send(content, ephemeral=ephemeral, **kwargs)
    return await interaction.response.send_message(content, ephemeral=ephemeral, **kwargs)


async def reply_error(interaction: nextcord.Interaction, msg: str):
    await reply(interaction, f"❌ {msg}", ephemeral=True)


async def load_player(interaction: nextcord.Interaction, command: str | None = None, user=None) -> dict | None:
    """
    Fetch the caller's record (or `user`'s), replying with an error and returning None
    when there is none or when `command` is still on cooldown.
    """
    from rpg.quests import reset_daily_quests_if_needed

    target = user or interaction.user
    if command:
        left = cooldowns.check_and_touch(interaction.user.id, command)
        if left > 0:
            await reply_error(interaction, f"Slow down! You can use this command again in {left:.0f}s.")
            return None
    data = get_user(target.id)
    if data is None:
        if target is interaction.user or target.id == interaction.user.id:
            await reply_error(interaction, "You haven't started your adventure yet. Use `/adventure start`.")
        else:
            await reply_error(interaction, f"{target.display_name} hasn't started their adventure yet.")
        return None
    reset_daily_quests_if_needed(data, time.time())
    return data
