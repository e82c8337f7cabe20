"""
Teleshop - a storefront served through a Telegram bot.
"""

__version__ = "0.1.0"
