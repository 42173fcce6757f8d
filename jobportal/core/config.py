from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"  # local | production
    APP_NAME: str = "job-portal-admin"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite+pysqlite:///./jobportal.db"

    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Stored image names are rewritten to IMAGE_BASE_URL + "<segment>/<file>".
    IMAGE_BASE_URL: str = "http://localhost:8080/uploads/"
    UPLOAD_DIR: str = "uploads"
    MAX_FILE_MB: int = 5
    UPLOAD_CACHE_SECONDS: int = 86400
    UPLOAD_ALLOWED_EXTENSIONS: str = ".jpg,.jpeg,.png,.gif,.webp,.svg"

    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 100

    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    OPENAI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    CHATBOT_SYSTEM_PROMPT: str = "You are a helpful job portal assistant. Answer clearly and concisely."
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org/reverse"
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    GEONAMES_URL: str = "http://api.geonames.org/timezoneJSON"
    GEONAMES_USERNAME: str = "demo"
    HTTP_USER_AGENT: str = "job-portal-admin/0.1"

    HOST: str = "0.0.0.0"
    PORT: int = 8080
    WEB_CONCURRENCY: int = 0  # 0 -> one worker per CPU in production

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def allowed_upload_extensions(self) -> set[str]:
        return {e.strip().lower() for e in self.UPLOAD_ALLOWED_EXTENSIONS.split(",") if e.strip()}

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() == "production"

settings = Settings()
