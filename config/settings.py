from pydantic import Field
from pydantic_settings import BaseSettings


class BotSettings(BaseSettings):
    discord_token: str | None = Field(default=None, description="Discord bot token")
    database_url: str = Field(default="sqlite:///data/bot.db", description="Database connection URL")

    bot_prefix: str = Field(default="!", description="Command prefix")
    environment: str = Field(default="development", description="Environment")
    log_level: str = Field(default="INFO", description="Logging level")
    version: str = Field(default="0.1.0", description="Version shown by the CLI")

    # Administration
    owner_id: int | None = Field(default=None, description="User id of the bot owner")
    admin_ids: list[int] = Field(default_factory=list, description="User ids granted admin rights (JSON list)")
    admin_bypasses_dm: bool = Field(default=False, description="Let admins run guild-only commands in DMs")

    # Dispatch
    test_mode: bool = Field(default=False, description="Only answer the owner")
    ignore_bots: bool = Field(default=True, description="Ignore messages sent by other bots")

    # Development settings
    debug: bool = Field(default=False, description="Enable debug mode")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = BotSettings()
