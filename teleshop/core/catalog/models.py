"""
Catalog models for Teleshop bot.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


DEFAULT_CATEGORY_NAME = "General"


@dataclass(frozen=True)
class Category:
    """Product category, used only to group products in navigation."""
    id: str
    name: str


@dataclass(frozen=True)
class Product:
    """Product in the catalog."""
    id: str
    name: str
    price: int
    code: str = ""
    pack_size: int = 1
    category_id: Optional[str] = None
    description: str = ""
    image_url: str = ""
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def has_remote_image(self) -> bool:
        return self.image_url.startswith(("http://", "https://"))

    @property
    def has_inline_image(self) -> bool:
        return self.image_url.startswith("data:")
