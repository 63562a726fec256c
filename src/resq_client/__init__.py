"""ResQ SOS client: beacon resolution, SOS submission and guard-status polling."""

__version__ = "1.0.0"
