import discord
from discord import app_commands

from . import reporter
from .errors import AlreadyExistsError, NoSessionsError, TrackerError
from .parsing import parse_iso_utc, parse_year_month


def _filled(*values):
    return all(value is not None and value.strip() for value in values)


async def _reply(interaction, content):
    await interaction.response.send_message(
        content,
        ephemeral=True,
        allowed_mentions=discord.AllowedMentions.none(),
    )


def register_commands(bot):
    """Register all slash commands on the bot. Called once during setup."""
    guild_scope = discord.Object(id=bot.config.guild_id)

    @bot.tree.command(name="register", description="Register a user for session tracking", guild=guild_scope)
    @app_commands.describe(user_id="Unique user identifier", name="Display name")
    async def register(interaction, user_id: str, name: str):
        if not _filled(user_id, name):
            await _reply(interaction, reporter.MISSING_PARAMETERS)
            return

        try:
            registered = bot.registry.register_user(user_id.strip(), name.strip())
        except AlreadyExistsError:
            bot.logger.info("Rejected duplicate registration: user=%s", user_id)
            registered = False

        await _reply(interaction, reporter.registration_content(registered))

    @bot.tree.command(name="record-session", description="Record a login/logout session", guild=guild_scope)
    @app_commands.describe(
        user_id="Registered user identifier",
        login="Login time, ISO-8601 (e.g. 2024-03-01T08:00)",
        logout="Logout time, ISO-8601",
    )
    async def record_session(interaction, user_id: str, login: str, logout: str):
        if not _filled(user_id, login, logout):
            await _reply(interaction, reporter.MISSING_PARAMETERS)
            return

        try:
            login_at = parse_iso_utc(login)
            logout_at = parse_iso_utc(logout)
            session = bot.registry.record_session(user_id.strip(), login_at, logout_at)
        except TrackerError as exc:
            bot.logger.info("Rejected session for user=%s: %s", user_id, exc)
            await _reply(interaction, reporter.invalid_data(exc))
            return

        bot.logger.info("Session recorded: user=%s minutes=%s", user_id, session.minutes)
        await _reply(interaction, "Session recorded")

    @bot.tree.command(name="total-activity", description="Show a user's total activity", guild=guild_scope)
    @app_commands.describe(user_id="User identifier")
    async def total_activity(interaction, user_id: str):
        if not _filled(user_id):
            await _reply(interaction, "Missing userId")
            return

        try:
            total = bot.analytics.total_activity_minutes(user_id.strip())
        except NoSessionsError:
            await _reply(interaction, reporter.NO_SESSIONS)
            return

        await _reply(interaction, reporter.total_activity_content(total))

    @bot.tree.command(name="inactive-users", description="List users inactive for more than N days", guild=guild_scope)
    @app_commands.describe(days="Inactivity threshold in days")
    async def inactive_users(interaction, days: str | None = None):
        await _reply(interaction, reporter.inactive_users_reply(bot.analytics, days))

    @bot.tree.command(name="monthly-activity", description="Show a user's activity per day for a month", guild=guild_scope)
    @app_commands.describe(user_id="User identifier", month="Month as YYYY-MM")
    async def monthly_activity(interaction, user_id: str, month: str):
        if not _filled(user_id, month):
            await _reply(interaction, reporter.MISSING_PARAMETERS)
            return

        try:
            year_month = parse_year_month(month)
            activity = bot.analytics.monthly_activity_by_day(user_id.strip(), year_month)
        except TrackerError as exc:
            await _reply(interaction, reporter.invalid_data(exc))
            return

        await _reply(interaction, reporter.monthly_activity_content(user_id.strip(), str(year_month), activity))

    @bot.tree.command(name="user-status", description="Show a user's activity tier and last session date", guild=guild_scope)
    @app_commands.describe(user_id="User identifier")
    async def user_status(interaction, user_id: str):
        if not _filled(user_id):
            await _reply(interaction, "Missing userId")
            return

        try:
            content = bot.reporter.build_status_content(user_id.strip())
        except NoSessionsError:
            await _reply(interaction, reporter.NO_SESSIONS)
            return

        await _reply(interaction, content)

    @bot.tree.command(name="tracker-status", description="Show bot status and tracked totals", guild=guild_scope)
    async def tracker_status(interaction):
        now_local = bot.analytics.clock().astimezone(bot.config.timezone)
        lines = [
            "Activity tracker status: online",
            f"Guild ID: `{bot.config.guild_id}`",
            f"Timezone: `{bot.config.timezone.key}`",
            f"Current local time: `{now_local.isoformat()}`",
            f"Local day: `{bot.analytics.local_day_key()}`",
            f"Registered users: `{bot.registry.user_count}`",
            f"Recorded sessions: `{bot.registry.session_count}`",
        ]
        await _reply(interaction, "\n".join(lines))

    @bot.tree.error
    async def on_command_error(interaction, error):
        bot.logger.error("Command failed: %s", interaction.command.name if interaction.command else "unknown", exc_info=error)
        if interaction.response.is_done():
            return
        await _reply(interaction, f"Command failed: `{error}`")
