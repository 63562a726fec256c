"""Pure domain services."""

from .display_state import derive_display_state

__all__ = ["derive_display_state"]
