import nextcord
from nextcord.ext import commands

from rpg.quests import on_command_used, validate_quests
from rpg.shops import SHOPS, ShopError, shop_items, buy_item, sell_item, sell_price
from rpg.catalog import find_item
from utils.functions import fmt_num
from utils.interactions import reply, reply_error, load_player
from utils.players import save_user

SHOP_CHOICES = {s.name: s.id for s in SHOPS.values()}


class ShopCog(commands.Cog):
    def __init__(self, bot):
        self.bot = bot

    @nextcord.slash_command(name="shop", description="Buy and sell items")
    async def shop(self, interaction: nextcord.Interaction):
        pass

    @shop.subcommand(name="list", description="See what a shop sells")
    async def shop_list(
        self,
        interaction: nextcord.Interaction,
        shop: str = nextcord.SlashOption(description="Shop", choices=SHOP_CHOICES, required=False),
    ):
        shops = [SHOPS[shop]] if shop else list(SHOPS.values())
        e = nextcord.Embed(title="🛒 Shops", color=0x70926C)
        for s in shops:
            lines = [f"{i.emoji} **{i.name}**: 🪙 {fmt_num(p)}" for i, p in shop_items(s)]
            owner = f" ({s.owner.name})" if s.owner else ""
            e.add_field(name=f"{s.emoji} {s.name}{owner}", value="\n".join(lines) or "Sold out.", inline=False)
        await reply(interaction, embed=e)

    @shop.subcommand(name="buy", description="Buy an item")
    async def shop_buy(
        self,
        interaction: nextcord.Interaction,
        shop: str = nextcord.SlashOption(description="Shop", choices=SHOP_CHOICES),
        item: str = nextcord.SlashOption(description="Item id or name"),
        amount: int = nextcord.SlashOption(description="How many", required=False, default=1, min_value=1),
    ):
        data = await load_player(interaction)
        if data is None:
            return
        try:
            paid = buy_item(data, SHOPS[shop], item, amount)
        except ShopError as e:
            await reply_error(interaction, str(e))
            return
        on_command_used(data, "shop buy")
        notes = validate_quests(data)
        save_user(data)
        await reply(interaction, "\n".join([f"✅ Bought {amount}x `{item}` for 🪙 {fmt_num(paid)}."] + notes))

    @shop.subcommand(name="sell", description="Sell an item")
    async def shop_sell(
        self,
        interaction: nextcord.Interaction,
        item: str = nextcord.SlashOption(description="Item id or name"),
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
            earned = sell_item(data, it.id, amount)
        except ShopError as e:
            await reply_error(interaction, str(e))
            return
        save_user(data)
        await reply(
            interaction,
            f"💰 Sold {amount}x {it.emoji} **{it.name}** for 🪙 {fmt_num(earned)} ({fmt_num(sell_price(it))} each).",
        )


def setup(bot):
    bot.add_cog(ShopCog(bot))
