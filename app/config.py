"""Feedback Lens configuration — loaded from environment variables / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Inference
    ai_provider: str = "workers_ai"  # "workers_ai" or "anthropic"
    ai_model: str = "@cf/meta/llama-3.1-8b-instruct"
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_api_key: str = ""

    # Cloudflare account (Workers AI + KV REST API)
    cloudflare_account_id: str = ""
    cloudflare_api_token: str = ""
    cloudflare_api_base: str = "https://api.cloudflare.com/client/v4"

    # Key-value store
    kv_backend: str = "sqlite"  # "sqlite" or "cloudflare"
    kv_namespace_id: str = ""
    kv_db_path: str = "data/feedback_kv.db"

    # Service settings
    port: int = 8787
    request_timeout_seconds: float = 30.0
    request_log_dir: str = "logs"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
