import nextcord
from nextcord.ext import commands

from rpg.catalog import find_item
from rpg.player import (
    PlayerError, use_consumable, equip_item, unequip_item, craft_item, remove_item,
)
from rpg.quests import on_item_claimed, validate_quests
from rpg.special_items import use_special
from rpg.types import Consumable, Special, EquipableItem, EQUIP_SLOT_NAMES
from utils.functions import fmt_num, match_name
from utils.interactions import reply, reply_error, load_player
from utils.players import save_user


def _owned_item(data: dict, token: str, include_equipped: bool = False):
    """Resolve `token` against the user's own items by id or name."""
    ids = list(data["inventory"])
    if include_equipped:
        ids += list(data["equipped_items"])
    items = [i for i in (find_item(x) for x in ids) if i is not None]
    for i in items:
        if i.id == token:
            return i, []
    by_name = {i.name: i for i in items}
    hit, sugg = match_name(list(by_name), token)
    return (by_name[hit] if hit else None), sugg


class Inventory(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    @nextcord.slash_command(name="inventory", description="Your items")
    async def inventory(self, interaction: nextcord.Interaction):
        pass

    async def _resolve(self, interaction, data, token, include_equipped=False):
        item, sugg = _owned_item(data, token, include_equipped)
        if item is None:
            if sugg:
                await reply_error(interaction, "Ambiguous item. Did you mean: " + ", ".join(f"`{s}`" for s in sugg) + " ?")
            else:
                await reply_error(interaction, f"You don't have any `{token}`.")
        return item

    @inventory.subcommand(name="info", description="Show your inventory")
    async def inventory_info(self, interaction: nextcord.Interaction):
        data = await load_player(interaction)
        if data is None:
            return
        lines = []
        for item_id, n in sorted(data["inventory"].items()):
            item = find_item(item_id)
            lines.append(f"{item.emoji} **{item.name}** x{n}" if item else f"`{item_id}` x{n}")
        e = nextcord.Embed(title=f"🎒 {data['tag']}'s inventory", description="\n".join(lines) or "Empty.")
        equipped = []
        for item_id, slot in data["equipped_items"].items():
            item = find_item(item_id)
            equipped.append(f"{EQUIP_SLOT_NAMES.get(slot, '?')}: {item.emoji} {item.name}" if item else item_id)
        e.add_field(name="Equipped", value="\n".join(equipped) or "Nothing.", inline=False)
        e.set_footer(text=f"{fmt_num(data['coins'])} coins")
        await reply(interaction, embed=e, ephemeral=True)

    @inventory.subcommand(name="use", description="Use an item")
    async def inventory_use(
        self,
        interaction: nextcord.Interaction,
        item: str = nextcord.SlashOption(description="Item to use"),
        amount: int = nextcord.SlashOption(description="How many", required=False, default=1, min_value=1),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        it = await self._resolve(interaction, data, item)
        if it is None:
            return
        try:
            if isinstance(it, Special):
                result = use_special(it, data, amount)
                lines, color = result.lines, result.color
            elif isinstance(it, Consumable):
                out = use_consumable(data, it, amount)
                lines, color = [], 0x70926C
                if out["health"]:
                    lines.append(f"❤️ +{fmt_num(out['health'])} health")
                if out["stamina"]:
                    lines.append(f"⚡ +{fmt_num(out['stamina'])} stamina")
                for item_id, n in out["items"].items():
                    lines.append(f"+{n}x `{item_id}`")
                    on_item_claimed(data, item_id, n)
                lines = lines or ["Nothing happened."]
            else:
                await reply_error(interaction, f"{it.name} can't be used.")
                return
        except PlayerError as e:
            await reply_error(interaction, str(e))
            return
        lines += validate_quests(data)
        save_user(data)
        print(f"[inventory] {data['id']} used {amount}x {it.id}")
        e = nextcord.Embed(title=f"{it.emoji} {it.name}", description="\n".join(lines), color=color or 0x70926C)
        await reply(interaction, embed=e)

    @inventory_use.on_autocomplete("item")
    async def _use_autocomplete(self, interaction: nextcord.Interaction, item: str):
        from utils.players import get_user

        data = get_user(interaction.user.id)
        if data is None:
            await interaction.response.send_autocomplete([])
            return
        names = []
        for item_id in data["inventory"]:
            it = find_item(item_id)
            if isinstance(it, (Special, Consumable)) and (not item or item.lower() in it.name.lower()):
                names.append(it.name)
        await interaction.response.send_autocomplete(names[:25])

    @inventory.subcommand(name="equip", description="Equip an item")
    async def inventory_equip(
        self,
        interaction: nextcord.Interaction,
        item: str = nextcord.SlashOption(description="Item to equip"),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        it = await self._resolve(interaction, data, item)
        if it is None:
            return
        if not isinstance(it, EquipableItem):
            await reply_error(interaction, f"{it.name} can't be equipped.")
            return
        try:
            equip_item(data, it)
        except PlayerError as e:
            await reply_error(interaction, str(e))
            return
        notes = validate_quests(data)
        save_user(data)
        await reply(interaction, "\n".join([f"✅ Equipped {it.emoji} **{it.name}**."] + notes))

    @inventory.subcommand(name="unequip", description="Unequip an item")
    async def inventory_unequip(
        self,
        interaction: nextcord.Interaction,
        item: str = nextcord.SlashOption(description="Item to unequip"),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        equipped = [find_item(i) for i in data["equipped_items"]]
        by_name = {i.name: i for i in equipped if i is not None}
        hit = item if item in data["equipped_items"] else None
        if hit is None:
            name, _ = match_name(list(by_name), item)
            hit = by_name[name].id if name else None
        if hit is None:
            await reply_error(interaction, f"`{item}` isn't equipped.")
            return
        try:
            unequip_item(data, hit)
        except PlayerError as e:
            await reply_error(interaction, str(e))
            return
        save_user(data)
        await reply(interaction, f"✅ Unequipped `{hit}`.")

    @inventory.subcommand(name="craft", description="Craft an item")
    async def inventory_craft(
        self,
        interaction: nextcord.Interaction,
        item: str = nextcord.SlashOption(description="Item to craft"),
        amount: int = nextcord.SlashOption(description="How many", required=False, default=1, min_value=1),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        it = find_item(item)
        if it is None:
            await reply_error(interaction, f"Unknown item `{item}`.")
            return
        try:
            craft_item(data, it, amount)
        except PlayerError as e:
            await reply_error(interaction, str(e))
            return
        on_item_claimed(data, it.id, amount)
        notes = validate_quests(data)
        save_user(data)
        print(f"[inventory] {data['id']} crafted {amount}x {it.id}")
        await reply(interaction, "\n".join([f"🔨 Crafted {amount}x {it.emoji} **{it.name}**."] + notes))

    @inventory.subcommand(name="discard", description="Throw items away")
    async def inventory_discard(
        self,
        interaction: nextcord.Interaction,
        item: str = nextcord.SlashOption(description="Item to discard"),
        amount: int = nextcord.SlashOption(description="How many", required=False, default=1, min_value=1),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        it = await self._resolve(interaction, data, item)
        if it is None:
            return
        try:
            remove_item(data, it.id, amount)
        except PlayerError as e:
            await reply_error(interaction, str(e))
            return
        save_user(data)
        await reply(interaction, f"🗑️ Discarded {amount}x {it.emoji} **{it.name}**.")


def setup(bot):
    bot.add_cog(Inventory(bot))
