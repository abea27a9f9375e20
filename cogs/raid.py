import nextcord
from nextcord.ext import commands

from cogs.fight import FightView
from rpg.fight import FightError, FightHandler
from rpg.player import sync_after_fight
from rpg.quests import on_command_used, on_npc_defeated, record_granted, validate_quests
from rpg.raids import RAIDS, build_raid_fight, raid_on_cooldown, mark_raid_cooldown, raid_rewards
from rpg.rewards import apply_rewards, format_granted
from utils.interactions import reply_error, load_player
from utils.players import get_user, save_user
from utils.settings import SETTINGS

RAID_CHOICES = {r.boss.name: r.id for r in RAIDS.values()}


class JoinView(nextcord.ui.View):
    def __init__(self, raid, host_id: int):
        super().__init__(timeout=SETTINGS.raid_join_seconds)
        self.raid = raid
        self.joined: list[int] = [host_id]

    @nextcord.ui.button(label="Join", emoji="⚔️", style=nextcord.ButtonStyle.success)
    async def join(self, button: nextcord.ui.Button, interaction: nextcord.Interaction):
        uid = interaction.user.id
        if uid in self.joined:
            await interaction.response.send_message("You already joined.", ephemeral=True)
            return
        if len(self.joined) >= self.raid.max_players:
            await interaction.response.send_message("The raid is full.", ephemeral=True)
            return
        data = get_user(uid)
        if data is None:
            await interaction.response.send_message("❌ Start your adventure first with `/adventure start`.", ephemeral=True)
            return
        left = raid_on_cooldown(data, self.raid)
        if left:
            await interaction.response.send_message(f"❌ You can raid this boss again in {left}s.", ephemeral=True)
            return
        if data["health"] <= 0:
            await interaction.response.send_message("❌ You're too hurt to raid.", ephemeral=True)
            return
        self.joined.append(uid)
        await interaction.response.send_message(f"✅ You joined the raid ({len(self.joined)}/{self.raid.max_players}).", ephemeral=True)


class Raid(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    @nextcord.slash_command(name="raid", description="Team up against a raid boss")
    async def raid(
        self,
        interaction: nextcord.Interaction,
        boss: str = nextcord.SlashOption(description="Raid boss", choices=RAID_CHOICES),
    ):
        raid = RAIDS[boss]
        data = await load_player(interaction, "raid")
        if data is None:
            return
        left = raid_on_cooldown(data, raid)
        if left:
            await reply_error(interaction, f"You can raid {raid.boss.name} again in {left}s.")
            return
        if data["health"] <= 0:
            await reply_error(interaction, "You're too hurt to raid.")
            return

        view = JoinView(raid, interaction.user.id)
        await interaction.response.send_message(
            f"{raid.boss.emoji} **{data['tag']}** is raiding **{raid.boss.name}**! "
            f"Click Join within {SETTINGS.raid_join_seconds}s (max {raid.max_players} players).",
            view=view,
        )
        await view.wait()

        participants = [d for d in (get_user(uid) for uid in view.joined) if d is not None]
        try:
            fight = build_raid_fight(raid, participants)
        except FightError as e:
            await interaction.edit_original_message(content=f"❌ {e}", view=None)
            return
        for p in participants:
            mark_raid_cooldown(p, raid)
            save_user(p)
        print(f"[raid] {raid.id} started by {data['id']} with {len(participants)} player(s)")

        players = fight.teams[0]
        controllers = {f.id: int(f.id) for f in players}

        async def on_end(f: FightHandler) -> list[str]:
            lines = []
            for fighter in players:
                fresh = get_user(fighter.id)
                if fresh is None:
                    continue
                sync_after_fight(fresh, fighter)
                on_command_used(fresh, "raid")
                rewards = raid_rewards(raid, f, fighter.id)
                if rewards is not None:
                    granted = apply_rewards(fresh, rewards, f.rng)
                    record_granted(fresh, granted)
                    on_npc_defeated(fresh, raid.boss.id)
                    lines.append(f"**{fighter.name}**: " + (", ".join(format_granted(granted)) or "nothing"))
                validate_quests(fresh, rng=f.rng)
                save_user(fresh)
            if f.winners != 0:
                lines.append(f"{raid.boss.emoji} **{raid.boss.name}** was too strong...")
            return lines

        await FightView(fight, controllers, on_end).start(interaction)


def setup(bot):
    bot.add_cog(Raid(bot))
