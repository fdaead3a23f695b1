"""Board client configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client settings, read from ``PROTASKER_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="PROTASKER_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    API_URL: str = "http://localhost:5000/api"
    # Pointer travel needed before a press on a card turns into a drag
    DRAG_ACTIVATION_DISTANCE: float = 8.0
    REQUEST_TIMEOUT: float = 10.0
