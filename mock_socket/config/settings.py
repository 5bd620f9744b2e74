"""
Simulator settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Simulator settings with defaults suited to test suites."""

    model_config = SettingsConfigDict(
        env_prefix="MOCK_SOCKET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Delay in seconds before a scheduled handshake/message runs.
    # Only ordering matters: handlers attached right after a constructor
    # returns must be in place before the first event fires.
    connect_delay: float = 0.004

    # Environment: "test" silences connection-failure diagnostics
    environment: str = "development"
    debug: bool = False
    log_connection_errors: bool = True

    # Name installed on the global namespace by a running server
    global_attribute: str = "WebSocket"

    default_socketio_url: str = "socket.io"

    # Upper bound on callbacks drained by one ManualScheduler.run_pending()
    max_pending_callbacks: int = 10_000

    @property
    def should_log_connection_errors(self) -> bool:
        """Connection failures are reported unless running under a test environment."""
        return self.log_connection_errors and self.environment != "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience export
settings = get_settings()
