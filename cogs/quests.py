import time

import nextcord
from nextcord.ext import commands

from rpg.chapters import (
    EMAILS, SIDE_QUESTS, get_chapter, chapter_completed, advance_chapter, read_email, archive_email,
    inbox, start_side_quest, claim_side_quest,
)
from rpg.quests import (
    QuestError, quest_label, claim_daily, validate_quests, run_action, on_command_used,
)
from rpg.rewards import format_granted
from utils.functions import fmt_num
from utils.interactions import reply, reply_error, load_player
from utils.players import save_user

SIDE_QUEST_CHOICES = {sq.title: sq.id for sq in SIDE_QUESTS.values()}


def _quest_block(quests: list[dict], data: dict, now: float) -> str:
    text = "\n".join(quest_label(q, data, now) for q in quests) or "No quests."
    return text[:1024]


class Quests(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    # ------------------------------------------------------------------
    # /chapter
    # ------------------------------------------------------------------

    @nextcord.slash_command(name="chapter", description="Story chapters")
    async def chapter(self, interaction: nextcord.Interaction):
        pass

    @chapter.subcommand(name="view", description="Your current chapter and its quests")
    async def chapter_view(self, interaction: nextcord.Interaction):
        data = await load_player(interaction)
        if data is None:
            return
        now = time.time()
        notes = validate_quests(data, now)
        save_user(data)
        chapter = get_chapter(data["chapter"]["id"])
        if chapter is None:
            await reply(interaction, "📖 To be continued...")
            return
        e = nextcord.Embed(
            title=f"📖 Chapter {chapter.id}: {chapter.title}",
            description=chapter.description,
            color=0x70926C,
        )
        e.add_field(name="Quests", value=_quest_block(data["chapter"]["quests"], data, now), inline=False)
        if chapter.hints:
            e.add_field(name="Hints", value="\n".join(f"💡 {h}" for h in chapter.hints), inline=False)
        if chapter_completed(data, now):
            e.set_footer(text="Chapter complete! Use /chapter next.")
        await reply(interaction, "\n".join(notes) or None, embed=e)

    @chapter.subcommand(name="next", description="Claim the chapter rewards and start the next one")
    async def chapter_next(self, interaction: nextcord.Interaction):
        data = await load_player(interaction)
        if data is None:
            return
        try:
            granted = advance_chapter(data)
        except QuestError as e:
            await reply_error(interaction, str(e))
            return
        notes = validate_quests(data)
        save_user(data)
        chapter = get_chapter(data["chapter"]["id"])
        print(f"[quests] {data['id']} reached chapter {chapter.id}")
        lines = format_granted(granted) + notes
        lines.append(f"\n📖 **Chapter {chapter.id}: {chapter.title}** begins.")
        await reply(interaction, "\n".join(lines))

    @chapter.subcommand(name="action", description="Do the pending action of your quests")
    async def chapter_action(self, interaction: nextcord.Interaction):
        data = await load_player(interaction)
        if data is None:
            return
        pending = [q for q in data["chapter"]["quests"] if q["type"] == "action" and not q["completed"]]
        if not pending:
            await reply_error(interaction, "Nothing to do right now.")
            return
        try:
            run_action(data, pending[0]["id"])
        except QuestError as e:
            await reply_error(interaction, str(e))
            return
        notes = validate_quests(data)
        save_user(data)
        await reply(interaction, "\n".join([f"✅ `{pending[0]['action']}` done."] + notes))

    # ------------------------------------------------------------------
    # /daily
    # ------------------------------------------------------------------

    @nextcord.slash_command(name="daily", description="Daily rewards and quests")
    async def daily(self, interaction: nextcord.Interaction):
        pass

    @daily.subcommand(name="claim", description="Claim your daily reward")
    async def daily_claim(self, interaction: nextcord.Interaction):
        data = await load_player(interaction, "daily")
        if data is None:
            return
        try:
            out = claim_daily(data)
        except QuestError as e:
            await reply_error(interaction, str(e))
            return
        on_command_used(data, "daily claim")
        notes = validate_quests(data)
        save_user(data)
        lines = [
            f"🪙 +{fmt_num(out['coins'])} coins",
            f"⭐ +{fmt_num(out['xp'])} XP",
            f"🔥 Streak: **{out['streak']}** day(s)",
        ] + notes
        await reply(interaction, embed=nextcord.Embed(title="📅 Daily reward", description="\n".join(lines), color=0x70926C))

    @daily.subcommand(name="quests", description="Your daily quests")
    async def daily_quests(self, interaction: nextcord.Interaction):
        data = await load_player(interaction)
        if data is None:
            return
        now = time.time()
        notes = validate_quests(data, now)
        save_user(data)
        e = nextcord.Embed(
            title="📅 Daily quests",
            description=_quest_block(data["daily"]["quests"], data, now),
            color=0x70926C,
        )
        e.set_footer(text=f"Completion streak: {data['daily'].get('quests_streak', 0)}")
        await reply(interaction, "\n".join(notes) or None, embed=e)

    # ------------------------------------------------------------------
    # /side quest
    # ------------------------------------------------------------------

    @nextcord.slash_command(name="side", description="Side quests")
    async def side(self, interaction: nextcord.Interaction):
        pass

    @side.subcommand(name="quest", description="Side quests")
    async def side_quest(self, interaction: nextcord.Interaction):
        pass

    @side_quest.subcommand(name="view", description="Side quests you can take or are doing")
    async def side_quest_view(self, interaction: nextcord.Interaction):
        data = await load_player(interaction)
        if data is None:
            return
        now = time.time()
        validate_quests(data, now)
        save_user(data)
        e = nextcord.Embed(title="🗺️ Side quests", color=0x70926C)
        started = {sq["id"]: sq for sq in data["side_quests"]}
        for sq in SIDE_QUESTS.values():
            entry = started.get(sq.id)
            if entry is not None and not entry["claimed_prize"]:
                value = _quest_block(entry["quests"], data, now)
            elif entry is not None:
                value = "✅ Done." + (" Use `/side quest start` to redo it." if sq.can_redo else "")
            elif sq.requirements(data):
                value = f"{sq.description}\nUse `/side quest start`."
            else:
                value = f"🔒 {sq.requirements_message or 'Locked.'}"
            e.add_field(name=f"{sq.emoji} {sq.title}", value=value[:1024], inline=False)
        await reply(interaction, embed=e)

    @side_quest.subcommand(name="start", description="Start a side quest")
    async def side_quest_start(
        self,
        interaction: nextcord.Interaction,
        quest: str = nextcord.SlashOption(description="Side quest", choices=SIDE_QUEST_CHOICES),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        try:
            start_side_quest(data, quest)
        except QuestError as e:
            await reply_error(interaction, str(e))
            return
        save_user(data)
        sq = SIDE_QUESTS[quest]
        await reply(interaction, f"{sq.emoji} **{sq.title}** started!")

    @side_quest.subcommand(name="claim", description="Claim a finished side quest's prize")
    async def side_quest_claim(
        self,
        interaction: nextcord.Interaction,
        quest: str = nextcord.SlashOption(description="Side quest", choices=SIDE_QUEST_CHOICES),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        try:
            granted = claim_side_quest(data, quest)
        except QuestError as e:
            await reply_error(interaction, str(e))
            return
        notes = validate_quests(data)
        save_user(data)
        await reply(interaction, "\n".join(["🎉 Prize claimed!"] + format_granted(granted) + notes))

    # ------------------------------------------------------------------
    # /emails
    # ------------------------------------------------------------------

    @nextcord.slash_command(name="emails", description="Your emails")
    async def emails(self, interaction: nextcord.Interaction):
        pass

    @emails.subcommand(name="view", description="List your emails")
    async def emails_view(
        self,
        interaction: nextcord.Interaction,
        archived: bool = nextcord.SlashOption(description="Show archived emails", required=False, default=False),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        lines = [
            f"{'📭' if entry['read'] else '📬'} `{email.id}` **{email.subject}** from {email.author.name} "
            f"<t:{int(entry['date'])}:R>"
            for entry, email in inbox(data, archived)
        ]
        e = nextcord.Embed(title="📧 Emails", description="\n".join(lines)[:4096] or "No emails.", color=0x70926C)
        await reply(interaction, embed=e, ephemeral=True)

    @emails.subcommand(name="read", description="Read an email")
    async def emails_read(
        self,
        interaction: nextcord.Interaction,
        email: str = nextcord.SlashOption(description="Email id"),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        try:
            granted = read_email(data, email)
        except QuestError as e:
            await reply_error(interaction, str(e))
            return
        notes = validate_quests(data)
        save_user(data)
        mail = EMAILS[email]
        e = nextcord.Embed(title=f"{mail.emoji} {mail.subject}", description=mail.content, color=0x70926C)
        e.set_author(name=f"{mail.author.name} <{mail.author.email or 'unknown'}>")
        extra = format_granted(granted) + notes
        if extra:
            e.add_field(name="Attached", value="\n".join(extra)[:1024], inline=False)
        if mail.footer:
            e.set_footer(text=mail.footer)
        await reply(interaction, embed=e)

    @emails.subcommand(name="archive", description="Archive an email")
    async def emails_archive(
        self,
        interaction: nextcord.Interaction,
        email: str = nextcord.SlashOption(description="Email id"),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        try:
            archive_email(data, email)
        except QuestError as e:
            await reply_error(interaction, str(e))
            return
        save_user(data)
        await reply(interaction, f"🗄️ `{email}` archived.", ephemeral=True)


def setup(bot):
    bot.add_cog(Quests(bot))
