import nextcord
from nextcord.ext import commands

from rpg.catalog import find_fightable_npc
from rpg.fight import Fighter, FightHandler, FightError
from rpg.npcs import FIGHTABLE_NPCS
from rpg.player import sync_after_fight
from rpg.quests import on_command_used, on_npc_defeated, record_granted, validate_quests
from rpg.rewards import apply_rewards, format_granted
from utils.interactions import reply, reply_error, load_player
from utils.players import get_user, save_user
from utils.settings import SETTINGS

_TITLES = {"npc": "⚔️ Fight", "duel": "🤺 Duel", "raid": "👹 Raid"}


def fight_embed(fight: FightHandler, extra: list[str] | None = None) -> nextcord.Embed:
    e = nextcord.Embed(
        title=f"{_TITLES.get(fight.type, 'Fight')} · round {fight.round}",
        description="\n".join(fight.status_lines()),
        color=0xB22222 if not fight.ended else 0x70926C,
    )
    logs = [line for t in fight.turns[-2:] for line in t.logs][-12:]
    text = "\n".join(logs)
    while len(text) > 1024 and logs:
        logs.pop(0)
        text = "\n".join(logs)
    if text:
        e.add_field(name="Log", value=text, inline=False)
    if extra:
        e.add_field(name="Result", value="\n".join(extra)[:1024], inline=False)
    if not fight.ended and fight.current is not None:
        e.set_footer(text=f"{fight.current.name}'s turn")
    return e


class TargetSelect(nextcord.ui.Select):
    def __init__(self, fight_view: "FightView"):
        fight = fight_view.fight
        options = [
            nextcord.SelectOption(
                label=f"{f.name}"[:100],
                value=f.id,
                description=f"❤️ {f.health}/{f.max_health}",
                default=f.id == fight_view.target_id,
            )
            for f in fight.fighters if f.alive
        ][:25]
        super().__init__(placeholder="Target", options=options, row=1)
        self.fight_view = fight_view

    async def callback(self, interaction: nextcord.Interaction):
        self.fight_view.target_id = self.values[0]
        self.fight_view.refresh()
        await interaction.response.edit_message(embed=fight_embed(self.fight_view.fight), view=self.fight_view)


class AbilitySelect(nextcord.ui.Select):
    def __init__(self, fight_view: "FightView", fighter: Fighter):
        options = []
        for a in fighter.abilities[:25]:
            cd = fighter.cooldowns.get(a.name, 0)
            state = f"cooldown {cd}" if cd else f"{a.stamina} ⚡"
            options.append(nextcord.SelectOption(label=a.name[:100], value=a.name, description=state))
        super().__init__(placeholder="Use an ability", options=options, row=2)
        self.fight_view = fight_view

    async def callback(self, interaction: nextcord.Interaction):
        await self.fight_view.act(interaction, "ability", self.values[0])


class FightView(nextcord.ui.View):
    """
    Buttons and selects for whoever controls the current fighter.
    `controllers` maps fighter ids to Discord user ids; `on_end(fight)` returns result lines.
    """

    def __init__(self, fight: FightHandler, controllers: dict[str, int], on_end):
        super().__init__(timeout=SETTINGS.fight_view_timeout)
        self.fight = fight
        self.controllers = controllers
        self.on_end = on_end
        self.target_id: str | None = None
        self.interaction: nextcord.Interaction | None = None
        self._selects: list[nextcord.ui.Select] = []
        self.refresh()

    def _acting_user_id(self) -> int | None:
        cur = self.fight.current
        if cur is None:
            return None
        return self.controllers.get(self.fight.controller_of(cur).id)

    def refresh(self):
        for s in self._selects:
            self.remove_item(s)
        self._selects = []
        cur = self.fight.current
        if self.fight.ended or cur is None:
            return
        target = self.fight.find_fighter(self.target_id) if self.target_id else None
        if target is None or not target.alive:
            enemies = self.fight.enemies_of(cur)
            self.target_id = enemies[0].id if enemies else None
        self._selects.append(TargetSelect(self))
        if cur.abilities:
            self._selects.append(AbilitySelect(self, cur))
        for s in self._selects:
            self.add_item(s)

    async def interaction_check(self, interaction: nextcord.Interaction) -> bool:
        if interaction.user.id != self._acting_user_id():
            await interaction.response.send_message("It's not your turn.", ephemeral=True)
            return False
        return True

    async def act(self, interaction: nextcord.Interaction, action: str, arg: str | None = None):
        fight = self.fight
        target = fight.find_fighter(self.target_id) if self.target_id else None
        try:
            if action == "attack":
                fight.attack(target)
            elif action == "defend":
                fight.defend()
            elif action == "forfeit":
                fight.forfeit()
            else:
                ability = next((a for a in fight.current.abilities if a.name == arg), None)
                if ability is None:
                    raise FightError(f"Unknown ability `{arg}`.")
                fight.use_ability(ability, target)
        except FightError as e:
            await interaction.response.send_message(f"❌ {e}", ephemeral=True)
            return
        fight.run_npc_turns()
        await self._render(interaction)

    async def _render(self, interaction: nextcord.Interaction):
        if self.fight.ended:
            lines = await self.on_end(self.fight)
            self.stop()
            await interaction.response.edit_message(embed=fight_embed(self.fight, lines), view=None)
            return
        self.refresh()
        await interaction.response.edit_message(embed=fight_embed(self.fight), view=self)

    @nextcord.ui.button(label="Attack", emoji="👊", style=nextcord.ButtonStyle.danger, row=0)
    async def attack_btn(self, button: nextcord.ui.Button, interaction: nextcord.Interaction):
        await self.act(interaction, "attack")

    @nextcord.ui.button(label="Defend", emoji="🛡️", style=nextcord.ButtonStyle.primary, row=0)
    async def defend_btn(self, button: nextcord.ui.Button, interaction: nextcord.Interaction):
        await self.act(interaction, "defend")

    @nextcord.ui.button(label="Forfeit", emoji="🏳️", style=nextcord.ButtonStyle.secondary, row=0)
    async def forfeit_btn(self, button: nextcord.ui.Button, interaction: nextcord.Interaction):
        await self.act(interaction, "forfeit")

    async def on_timeout(self):
        # nobody is clicking anymore: every player left standing forfeits
        self.fight.abandon()
        lines = await self.on_end(self.fight)
        print(f"[fight] {self.fight.id} view timed out")
        if self.interaction is not None:
            try:
                await self.interaction.edit_original_message(embed=fight_embed(self.fight, lines), view=None)
            except nextcord.HTTPException as e:
                print(f"[fight] could not edit timed out fight {self.fight.id}: {e}")

    async def start(self, interaction: nextcord.Interaction):
        """Send the first message (or the result if the NPCs already finished the fight)."""
        self.fight.run_npc_turns()
        self.interaction = interaction
        lines, view = None, self
        if self.fight.ended:
            lines = await self.on_end(self.fight)
            self.stop()
            view = None
        else:
            self.refresh()
        embed = fight_embed(self.fight, lines)
        if interaction.response.is_done():
            # the original message (challenge / raid lobby) becomes the fight
            await interaction.edit_original_message(content=None, embed=embed, view=view)
        elif view is None:
            await reply(interaction, embed=embed)
        else:
            await reply(interaction, embed=embed, view=view)


class AcceptView(nextcord.ui.View):
    def __init__(self, user_id: int):
        super().__init__(timeout=60)
        self.user_id = user_id
        self.accepted = False

    async def interaction_check(self, interaction: nextcord.Interaction) -> bool:
        if interaction.user.id != self.user_id:
            await interaction.response.send_message("This challenge isn't for you.", ephemeral=True)
            return False
        return True

    @nextcord.ui.button(label="Accept", style=nextcord.ButtonStyle.success)
    async def accept(self, button: nextcord.ui.Button, interaction: nextcord.Interaction):
        self.accepted = True
        await interaction.response.defer()
        self.stop()

    @nextcord.ui.button(label="Decline", style=nextcord.ButtonStyle.secondary)
    async def decline(self, button: nextcord.ui.Button, interaction: nextcord.Interaction):
        await interaction.response.defer()
        self.stop()


class FightCog(commands.Cog):
    def __init__(self, bot):
        self.bot = bot
        self.busy: set[int] = set()

    @nextcord.slash_command(name="fight", description="Fight someone")
    async def fight(self, interaction: nextcord.Interaction):
        pass

    @fight.subcommand(name="npc", description="Fight an NPC")
    async def fight_npc(
        self,
        interaction: nextcord.Interaction,
        npc: str = nextcord.SlashOption(description="Who to fight"),
    ):
        if interaction.user.id in self.busy:
            await reply_error(interaction, "You're already in a fight.")
            return
        data = await load_player(interaction, "fight")
        if data is None:
            return
        target = find_fightable_npc(npc)
        if target is None:
            await reply_error(interaction, f"Unknown NPC `{npc}`.")
            return
        if data["health"] <= 0:
            await reply_error(interaction, "You're too hurt to fight. Heal up with a consumable first.")
            return
        save_user(data)

        me = Fighter.from_user(data)
        fight = FightHandler([[me], [Fighter.from_npc(target)]], type="npc")
        uid = interaction.user.id
        self.busy.add(uid)

        async def on_end(f: FightHandler) -> list[str]:
            self.busy.discard(uid)
            fresh = get_user(uid)
            if fresh is None:
                return []
            sync_after_fight(fresh, me)
            on_command_used(fresh, "fight npc")
            lines = []
            if f.winners == 0:
                if target.dialogues.get("win"):
                    lines.append(f"{target.emoji} **{target.name}:** {target.dialogues['win']}")
                granted = apply_rewards(fresh, target.rewards, f.rng)
                record_granted(fresh, granted)
                on_npc_defeated(fresh, target.id)
                lines += format_granted(granted)
            else:
                if target.dialogues.get("lose"):
                    lines.append(f"{target.emoji} **{target.name}:** {target.dialogues['lose']}")
                lines.append("You lost...")
            lines += validate_quests(fresh, rng=f.rng)
            save_user(fresh)
            return lines

        await FightView(fight, {me.id: uid}, on_end).start(interaction)

    @fight_npc.on_autocomplete("npc")
    async def _npc_autocomplete(self, interaction: nextcord.Interaction, npc: str):
        names = [n.name for n in FIGHTABLE_NPCS.values() if not npc or npc.lower() in n.name.lower()]
        await interaction.response.send_autocomplete(names[:25])

    @fight.subcommand(name="duel", description="Challenge another player")
    async def fight_duel(
        self,
        interaction: nextcord.Interaction,
        opponent: nextcord.Member = nextcord.SlashOption(description="Who to challenge"),
    ):
        if opponent.id == interaction.user.id or opponent.bot:
            await reply_error(interaction, "Pick another player.")
            return
        if interaction.user.id in self.busy or opponent.id in self.busy:
            await reply_error(interaction, "One of you is already in a fight.")
            return
        data = await load_player(interaction, "fight")
        if data is None:
            return
        other = await load_player(interaction, user=opponent)
        if other is None:
            return

        view = AcceptView(opponent.id)
        await reply(interaction, f"🤺 {opponent.mention}, **{data['tag']}** challenges you to a duel!", view=view)
        await view.wait()
        if not view.accepted:
            await interaction.edit_original_message(content="The duel was declined.", view=None)
            return

        a = Fighter(data, is_npc=False, name=data["tag"], full_health=True)
        b = Fighter(other, is_npc=False, name=other["tag"], full_health=True)
        fight = FightHandler([[a], [b]], type="duel")
        self.busy.update((interaction.user.id, opponent.id))

        async def on_end(f: FightHandler) -> list[str]:
            self.busy.discard(interaction.user.id)
            self.busy.discard(opponent.id)
            for uid in (interaction.user.id, opponent.id):
                fresh = get_user(uid)
                if fresh is not None:
                    on_command_used(fresh, "fight duel")
                    save_user(fresh)
            return [f"Damage dealt: {a.name} {a.total_damage_dealt:,} · {b.name} {b.total_damage_dealt:,}"]

        await FightView(fight, {a.id: interaction.user.id, b.id: opponent.id}, on_end).start(interaction)


def setup(bot):
    bot.add_cog(FightCog(bot))
