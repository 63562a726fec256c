"""Incident session and remote service configuration."""

from pydantic import BaseModel, Field, SecretStr, model_validator


class ApiSettings(BaseModel):
    """Remote incident service connection settings."""

    base_url: str = Field(default="https://resq-server.onrender.com/api", description="Incident service base URL")
    timeout: float = Field(default=30.0, ge=1.0, le=300.0, description="Transport timeout in seconds")
    token: SecretStr | None = Field(default=None, description="Auth token sent as 'Token <value>'")
    rating_endpoint_enabled: bool = Field(
        default=False,
        description="Deliver ratings to the server instead of acknowledging them locally",
    )


class SessionSettings(BaseModel):
    """Polling cadence for an incident session."""

    poll_interval: float = Field(default=5.0, gt=0.0, le=300.0, description="Seconds between status polls")
    max_backoff: float = Field(default=30.0, gt=0.0, le=600.0, description="Upper bound for the failure backoff")
    backoff_multiplier: float = Field(default=2.0, ge=1.0, le=10.0)
    backoff_jitter: bool = Field(default=True, description="Add +/-25% jitter to backoff delays")
    default_description: str = Field(default="SOS Alert triggered at {timestamp}")
    location_placeholder: str = Field(default="Campus Beacon")

    @model_validator(mode="after")
    def check_backoff_bounds(self) -> "SessionSettings":
        """Backoff cap can never be below the base interval."""
        if self.max_backoff < self.poll_interval:
            raise ValueError("max_backoff must be greater than or equal to poll_interval")
        return self
