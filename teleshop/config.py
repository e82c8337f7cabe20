"""
Configuration management for Teleshop Bot.
Loads settings from environment variables with validation.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Path(__file__).parent.parent / "data"

    # Telegram
    telegram_bot_token: Optional[str] = Field(
        default=None, description="Telegram Bot API token"
    )

    # Polling
    poll_interval: float = Field(
        default=2.0, description="Seconds between two getUpdates calls"
    )
    poll_batch_size: int = Field(
        default=50, description="Maximum number of updates fetched per tick"
    )

    # Catalog rendering
    inline_results_limit: int = Field(
        default=20, description="Maximum inline query results"
    )
    search_results_limit: int = Field(
        default=10, description="Maximum results of a free-text search"
    )
    list_limit: int = Field(
        default=20, description="Maximum product buttons in one list"
    )
    currency: str = Field(default="Toman", description="Currency label")

    # Conversations
    session_ttl_minutes: int = Field(
        default=60, description="Idle minutes before an open order wizard expires, 0 disables"
    )

    # Payments and checkout
    payment_api_key: Optional[str] = Field(
        default=None, description="Payment provider key, enables payment links"
    )
    payment_base_url: str = Field(
        default="https://example.com/pay", description="Payment page base URL"
    )
    storefront_url: Optional[str] = Field(
        default=None, description="Web storefront used for multi-item checkout links"
    )

    # Shipping
    shipping_method: Optional[str] = Field(
        default=None, description="Shipping method recorded on chat orders"
    )
    shipping_cost: int = Field(
        default=0, description="Flat shipping cost added to every chat order"
    )

    # Texts
    contact_message: str = Field(
        default=(
            "📞 <b>Contact us</b>\n\n"
            "🆔 Support: @admin\n"
            "📱 Phone: 09120000000"
        ),
        description="Reply to the contact command",
    )

    # Manager notification
    manager_chat_id: Optional[int] = Field(
        default=None, description="Telegram chat that receives new orders"
    )

    # Database
    database_url: Optional[str] = Field(
        default=None,
        description="Database connection URL",
    )

    # Debug
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def db_url(self) -> str:
        """Get database URL with absolute path."""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.data_dir / 'teleshop.db'}"

    @property
    def orders_dir(self) -> Path:
        """Directory for exported order sheets."""
        return self.data_dir / "orders"


# Global settings instance
settings = Settings()
