import os
import nextcord
from nextcord.ext import commands
from dotenv import load_dotenv, find_dotenv

from utils.settings import SETTINGS

# Token comes from a .env file next to bot.py (see .env.example)
env_path = find_dotenv()
if not env_path:
    raise RuntimeError("Couldn't find a .env file. Copy .env.example to .env and fill it in.")
load_dotenv(env_path)

TOKEN = os.getenv("DISCORD_TOKEN")
if not TOKEN:
    raise RuntimeError("DISCORD_TOKEN missing. Check .env contents and spelling.")

# Slash commands only, no message content needed
intents = nextcord.Intents.default()

bot = commands.Bot(intents=intents)

initial_extensions = [
    "cogs.adventure",
    "cogs.inventory",
    "cogs.shop",
    "cogs.fight",
    "cogs.raid",
    "cogs.quests",
]


@bot.event
async def on_ready():
    print(f"✅ Logged in as {bot.user}")
    print(f"[settings] {SETTINGS.source or 'defaults'} (data in {SETTINGS.data_dir}/)")


for ext in initial_extensions:
    try:
        bot.load_extension(ext)
        print(f"Loaded: {ext}")
    except Exception as e:
        print(f"Failed to load {ext}: {e}")


bot.run(TOKEN)
