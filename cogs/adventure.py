import time

import nextcord
from nextcord.ext import commands

from rpg.chapters import load_chapter, get_chapter
from rpg.player import (
    PlayerError, new_user_data, get_stand, get_skill_points, get_max_health, get_max_stamina,
    skill_points_left, invest_skill_points,
)
from rpg.quests import reset_daily_quests_if_needed, validate_quests
from rpg.special_items import SkillPointsResetPotion, use_special
from rpg.types import SKILL_KEYS
from utils.functions import fmt_num, get_max_xp, life_bar
from utils.interactions import reply, reply_error, load_player
from utils.players import create_user, save_user, leaderboard, LEADERBOARD_KEYS


def _stand_embed(stand, owner_name: str) -> nextcord.Embed:
    e = nextcord.Embed(
        title=f"{stand.emoji} {stand.name}",
        description=stand.description,
        color=stand.color,
    )
    e.add_field(name="Rarity", value=stand.rarity)
    e.add_field(
        name="Skill points",
        value="\n".join(f"+{v} {k}" for k, v in stand.skill_points.items() if v) or "none",
    )
    e.add_field(
        name="Abilities",
        value="\n".join(
            f"**{a.name}** ({a.stamina} ⚡, cd {a.cooldown})" for a in stand.abilities
        ),
        inline=False,
    )
    e.set_footer(text=f"Stand of {owner_name}")
    return e


class ConfirmView(nextcord.ui.View):
    def __init__(self, author_id: int):
        super().__init__(timeout=60)
        self.author_id = author_id
        self.value: bool | None = None

    async def interaction_check(self, interaction: nextcord.Interaction) -> bool:
        if interaction.user.id != self.author_id:
            await interaction.response.send_message("This menu belongs to someone else.", ephemeral=True)
            return False
        return True

    @nextcord.ui.button(label="Confirm", style=nextcord.ButtonStyle.danger)
    async def confirm(self, button: nextcord.ui.Button, interaction: nextcord.Interaction):
        self.value = True
        await interaction.response.defer()
        self.stop()

    @nextcord.ui.button(label="Cancel", style=nextcord.ButtonStyle.secondary)
    async def cancel(self, button: nextcord.ui.Button, interaction: nextcord.Interaction):
        self.value = False
        await interaction.response.defer()
        self.stop()


class Adventure(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    # ------------------------------------------------------------------
    # /adventure
    # ------------------------------------------------------------------

    @nextcord.slash_command(name="adventure", description="Your bizarre adventure")
    async def adventure(self, interaction: nextcord.Interaction):
        pass

    @adventure.subcommand(name="start", description="Start your adventure")
    async def adventure_start(self, interaction: nextcord.Interaction):
        now = time.time()
        data = new_user_data(interaction.user.id, str(interaction.user), now)
        load_chapter(data, 1)
        reset_daily_quests_if_needed(data, now)
        if not create_user(data):
            await reply_error(interaction, "You already started your adventure. Check `/profile`.")
            return
        print(f"[adventure] new player {data['id']} ({data['tag']})")
        chapter = get_chapter(1)
        e = nextcord.Embed(
            title="🌅 Your bizarre adventure begins",
            description=f"**Chapter {chapter.id}: {chapter.title}**\n{chapter.description}",
            color=0x70926C,
        )
        if chapter.dialogs:
            e.add_field(name="...", value="\n".join(chapter.dialogs), inline=False)
        e.set_footer(text="Use /chapter view to see your quests.")
        await reply(interaction, embed=e)

    # ------------------------------------------------------------------
    # /profile
    # ------------------------------------------------------------------

    @nextcord.slash_command(name="profile", description="Show a profile")
    async def profile(
        self,
        interaction: nextcord.Interaction,
        user: nextcord.Member = nextcord.SlashOption(description="Whose profile", required=False),
    ):
        data = await load_player(interaction, user=user)
        if data is None:
            return
        stand = get_stand(data)
        sp = get_skill_points(data)
        mh, ms = get_max_health(data), get_max_stamina(data)
        max_xp = get_max_xp(data["level"])
        e = nextcord.Embed(title=f"{data['tag']}'s profile", color=stand.color if stand else 0x70926C)
        e.add_field(name="Level", value=f"**{data['level']}**\n{life_bar(data['xp'], max_xp)} {fmt_num(data['xp'])}/{fmt_num(max_xp)} XP")
        e.add_field(name="Coins", value=f"🪙 {fmt_num(data['coins'])}")
        e.add_field(name="Stand", value=f"{stand.emoji} {stand.name}" if stand else "Stand-less")
        e.add_field(name="Health", value=f"❤️ {life_bar(data['health'], mh)} {fmt_num(data['health'])}/{fmt_num(mh)}")
        e.add_field(name="Stamina", value=f"⚡ {life_bar(data['stamina'], ms)} {fmt_num(data['stamina'])}/{fmt_num(ms)}")
        e.add_field(name="Skill points", value="\n".join(f"{k}: {sp[k]}" for k in SKILL_KEYS), inline=False)
        e.set_footer(text=f"Chapter {data['chapter']['id']} · daily streak {data['daily']['claim_streak']}")
        save_user(data)
        await reply(interaction, embed=e)

    # ------------------------------------------------------------------
    # /stand
    # ------------------------------------------------------------------

    @nextcord.slash_command(name="stand", description="Your stand")
    async def stand(self, interaction: nextcord.Interaction):
        pass

    @stand.subcommand(name="display", description="Display your stand")
    async def stand_display(
        self,
        interaction: nextcord.Interaction,
        user: nextcord.Member = nextcord.SlashOption(description="Whose stand", required=False),
    ):
        data = await load_player(interaction, user=user)
        if data is None:
            return
        stand = get_stand(data)
        if stand is None:
            await reply_error(interaction, f"{data['tag']} doesn't have a stand.")
            return
        await reply(interaction, embed=_stand_embed(stand, data["tag"]))

    @stand.subcommand(name="delete", description="Throw your stand away (forever)")
    async def stand_delete(self, interaction: nextcord.Interaction):
        data = await load_player(interaction)
        if data is None:
            return
        stand = get_stand(data)
        if stand is None:
            await reply_error(interaction, "You don't have a stand.")
            return
        view = ConfirmView(interaction.user.id)
        await reply(interaction, f"⚠️ Do you really want to delete {stand.emoji} **{stand.name}**?", view=view)
        await view.wait()
        if not view.value:
            await interaction.edit_original_message(content="Cancelled.", view=None)
            return
        data = await load_player(interaction)
        if data is None:
            return
        data["stand"] = None
        save_user(data)
        print(f"[adventure] {data['id']} deleted stand {stand.id}")
        await interaction.edit_original_message(content=f"🗑️ {stand.name} is gone.", view=None)

    # ------------------------------------------------------------------
    # /skill points
    # ------------------------------------------------------------------

    @nextcord.slash_command(name="skill", description="Skill points")
    async def skill(self, interaction: nextcord.Interaction):
        pass

    @skill.subcommand(name="points", description="Skill points")
    async def points(self, interaction: nextcord.Interaction):
        pass

    @points.subcommand(name="view", description="Show your skill points")
    async def points_view(self, interaction: nextcord.Interaction):
        data = await load_player(interaction)
        if data is None:
            return
        sp = get_skill_points(data)
        lines = [f"**{k}**: {data['skill_points'].get(k, 0)} invested ({sp[k]} total)" for k in SKILL_KEYS]
        lines.append(f"\nPoints left: **{skill_points_left(data)}**")
        await reply(interaction, "\n".join(lines), ephemeral=True)

    @points.subcommand(name="invest", description="Invest skill points")
    async def points_invest(
        self,
        interaction: nextcord.Interaction,
        stat: str = nextcord.SlashOption(description="Skill", choices={k: k for k in SKILL_KEYS}),
        amount: int = nextcord.SlashOption(description="How many points", min_value=1),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        try:
            invest_skill_points(data, stat, amount)
        except PlayerError as e:
            await reply_error(interaction, str(e))
            return
        notes = validate_quests(data)
        save_user(data)
        await reply(interaction, "\n".join([f"✅ +{amount} {stat}. {skill_points_left(data)} point(s) left."] + notes))

    @points.subcommand(name="reset", description="Reset your skill points (uses a Skill Points Reset Potion)")
    async def points_reset(self, interaction: nextcord.Interaction):
        data = await load_player(interaction)
        if data is None:
            return
        try:
            result = use_special(SkillPointsResetPotion, data)
        except PlayerError as e:
            await reply_error(interaction, str(e))
            return
        save_user(data)
        await reply(interaction, "\n".join(result.lines))

    # ------------------------------------------------------------------
    # /leaderboard
    # ------------------------------------------------------------------

    @nextcord.slash_command(name="leaderboard", description="Top players")
    async def leaderboard_cmd(
        self,
        interaction: nextcord.Interaction,
        key: str = nextcord.SlashOption(
            description="Sort by", choices={k: k for k in LEADERBOARD_KEYS}, required=False, default="level",
        ),
    ):
        rows = leaderboard(key, limit=10)
        if not rows:
            await reply(interaction, "Nobody is on the leaderboard yet.")
            return
        medals = {0: "🥇", 1: "🥈", 2: "🥉"}
        lines = [
            f"{medals.get(i, f'`#{i + 1}`')} **{r['tag']}**: level {r['level']} · {fmt_num(r['coins'])} coins"
            for i, r in enumerate(rows)
        ]
        await reply(interaction, embed=nextcord.Embed(title=f"🏆 Leaderboard ({key})", description="\n".join(lines)))


def setup(bot):
    bot.add_cog(Adventure(bot))
