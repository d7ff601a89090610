from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/cvintel.db"

    # Generative-text provider: "openai" or "mock"
    llm_provider: str = "openai"
    openai_api_key: str = ""
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.2  # Low temperature keeps signal detection stable
    llm_max_tokens: int = 2000

    cors_origins: list[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"

    @property
    def provider_configured(self) -> bool:
        if self.llm_provider.lower() == "mock":
            return True
        return bool(self.openai_api_key)

    @property
    def store_configured(self) -> bool:
        return bool(self.database_url)


@lru_cache
def get_settings() -> Settings:
    return Settings()
