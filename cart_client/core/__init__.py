# Core modules

from .config import ClientSettings, get_settings
from .session import ShopperSession

__all__ = ["ClientSettings", "get_settings", "ShopperSession"]
