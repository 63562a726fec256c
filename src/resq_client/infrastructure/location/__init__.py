"""Device positioning adapters."""

from .position_provider import NullPositionProvider, StaticPositionProvider, position_provider_from_settings

__all__ = ["NullPositionProvider", "StaticPositionProvider", "position_provider_from_settings"]
