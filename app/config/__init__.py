"""Application configuration module.

- **settings.py**: Environment-based settings (Pydantic BaseSettings)
  - Database URL, LLM config, JWT secrets, rate limits
  - Loaded from .env file via pydantic-settings

- **weekly_plan.py**: Weekly template constants
  - Day labels and categories, sampling counts per day kind
"""
from app.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
