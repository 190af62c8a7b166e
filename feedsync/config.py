# feedsync/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|prod
    FEEDSYNC_DB_URL: str = "sqlite+aiosqlite:///./feedsync.db"

    # --- Operational API auth ---
    # Send: X-API-Key: <key>
    API_KEY: str | None = None

    # --- External listing feed (OData) ---
    # Full resource URL incl. token, e.g.
    # https://api.bridgedataoutput.com/api/v2/OData/har/Property?access_token=...
    FEED_API_URL: str | None = None
    FEED_FILTER: str = "(City eq 'Houston') and (PropertyType eq 'Residential')"
    FEED_PAGE_SIZE: int = 100
    FEED_PAGE_DELAY_S: float = 1.0  # be polite between pages
    FEED_HTTP_TIMEOUT_S: float = 30
    FEED_DEFAULT_STATE: str = "TX"

    # Account the imported listings are attributed to (users.id)
    FEED_IMPORT_OWNER_ID: str | None = None

    # Budget for the standalone job; unset = consume the whole feed
    MAX_LISTINGS: int | None = None

    # --- Scheduler ---
    # QUIET BY DEFAULT: the timer fires but does nothing unless this is true
    RUN_FEED_CRON: bool = False
    SCHED_IMPORT_INTERVAL_HOURS: int = 2
    SCHED_IMPORT_BUDGET: int = 200
    SCHED_IMPORT_ALLOW_OVERLAP: bool = False
    IMPORT_RUN_TIMEOUT_S: float | None = None


settings = Settings()
