from __future__ import annotations

import logging

import discord
from discord.ext import commands
from dotenv import load_dotenv

from .analytics import ActivityAnalytics
from .commands import register_commands
from .config import Config, load_config
from .registry import SessionRegistry
from .reporter import Reporter
from .status import UserStatusService

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class ActivityTrackerBot(commands.Bot):
    def __init__(self, config: Config, registry: SessionRegistry | None = None) -> None:
        intents = discord.Intents.none()
        intents.guilds = True

        super().__init__(command_prefix="!", intents=intents)

        self.config = config
        self.registry = registry or SessionRegistry()
        self.analytics = ActivityAnalytics(self.registry, tz=config.timezone)
        self.status_service = UserStatusService(self.analytics, self.registry, tz=config.timezone)
        self.reporter = Reporter(self.status_service, self.registry)

        self.logger = logging.getLogger("activity-tracker-bot")

    async def setup_hook(self) -> None:
        # Slash commands are guild-scoped so syncing takes effect immediately.
        register_commands(self)
        await self.tree.sync(guild=discord.Object(id=self.config.guild_id))

    async def on_ready(self) -> None:
        self.logger.info("Connected as %s (%s)", self.user, self.user.id if self.user else "unknown")

        if self.get_guild(self.config.guild_id) is None:
            self.logger.error("Configured guild %s not found", self.config.guild_id)
            await self.close()


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main() -> None:
    load_dotenv()
    config = load_config()
    configure_logging(config.log_level)

    bot = ActivityTrackerBot(config=config)
    bot.run(config.discord_token, log_handler=None)


if __name__ == "__main__":
    main()
