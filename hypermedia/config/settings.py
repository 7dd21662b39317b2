from pydantic_settings import BaseSettings, SettingsConfigDict


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------
class Settings(BaseSettings):
    """
    Library settings managed by Pydantic.
    Reads from HYPERMEDIA_* environment variables and/or .env file.
    """
    # Logging
    LOG_LEVEL: str = "INFO"

    # URI templates
    URI_TEMPLATE_CACHE_SIZE: int = 256

    # Pagination links
    PAGE_PARAMETER: str = "page"
    SIZE_PARAMETER: str = "size"
    ONE_INDEXED_PARAMETERS: bool = False

    # Config to read from .env file if available
    model_config = SettingsConfigDict(
        env_prefix="HYPERMEDIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
        )

settings = Settings()
