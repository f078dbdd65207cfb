from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Pydantic Settings automatically reads env vars matching field names (case-insensitive).
    In development, it also reads from .env file if present.
    """

    # Listen address for the uvicorn server
    host: str = "0.0.0.0"
    port: int = 3000

    # Append the formatted traceback to the plain-text body of recovered panics
    recovery_print_stack: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",  # Load from .env in development
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


settings = Settings()
