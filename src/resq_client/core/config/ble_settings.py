"""BLE beacon scanning configuration."""

from pydantic import BaseModel, Field, field_validator

FALLBACK_BEACON_ID = "550e8400-e29b-41d4-a716-446655441111"


class BeaconScanSettings(BaseModel):
    """Timeout, fallback and qualification policy for beacon scans."""

    timeout: float = Field(default=10.0, gt=0.0, le=60.0, description="Scan window in seconds")
    fallback_beacon_id: str = Field(default=FALLBACK_BEACON_ID, description="Identifier used when no beacon answers")
    rssi_threshold: int = Field(
        default=-100,
        le=0,
        description="Minimum usable signal strength in dBm (exclusive)",
    )
    marker_tokens: tuple[str, ...] = Field(
        default=("beacon", "ibeacon", "esp", "nrf"),
        description="Name fragments that identify a proximity beacon",
    )

    @field_validator("marker_tokens")
    @classmethod
    def normalize_tokens(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Lowercase marker tokens and drop blanks."""
        return tuple(token.strip().lower() for token in v if token and token.strip())
