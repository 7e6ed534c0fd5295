from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    llm_provider: str = "deepseek"  # "deepseek" or "zhipu"

    deepseek_api_key: Optional[str] = None
    deepseek_base_url: str = "https://api.deepseek.com"
    deepseek_model: str = "deepseek-chat"

    zhipu_api_key: Optional[str] = None  # "<id>.<secret>"
    zhipu_base_url: str = "https://open.bigmodel.cn/api/paas/v4"
    zhipu_model: str = "glm-4"
    zhipu_token_ttl_seconds: int = 3600

    upstream_timeout_seconds: float = 60.0

    airtable_api_key: Optional[str] = None
    airtable_base_id: Optional[str] = None
    airtable_table: str = "Log"
    airtable_api_url: str = "https://api.airtable.com/v0"

    # Prompt overrides, the shipped prompts are used when unset
    heuristic_prompt: Optional[str] = None
    instructive_prompt: Optional[str] = None

    sentry_dsn: Optional[str] = None
    frontend_origins: str = ""

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
