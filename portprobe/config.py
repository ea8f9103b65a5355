"""Probe configuration using pydantic-settings."""

from pydantic import NonNegativeFloat, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProbeSettings(BaseSettings):
    """Probe defaults loaded from PORTPROBE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PORTPROBE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Connection timeouts (milliseconds)
    tcp_timeout_ms: PositiveInt = 1000
    udp_timeout_ms: PositiveInt = 1000

    # Post-connect exchange
    probe_payload: str = "Hello"
    response_wait_seconds: NonNegativeFloat = 2.5
    read_chunk_size: PositiveInt = 1024
    max_response_bytes: PositiveInt = 65536
    response_encoding: str = "ascii"

    # Application
    log_level: str = "INFO"


settings = ProbeSettings()
