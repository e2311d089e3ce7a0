from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Optional

# Get the project root directory (parent of studyplan folder)
PROJECT_ROOT = Path(__file__).parent.parent

class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""
    database_url: str = "sqlite:///./study_planner.db"

    # AI Provider Configuration
    ai_provider: str = "ollama"  # "ollama" or "claude"

    # Ollama settings (for local development)
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2:latest"

    # Claude API settings (for production)
    claude_api_key: str = ""
    claude_model: str = "claude-3-5-sonnet-20241022"

    # Topic explainer generation settings
    explainer_temperature: float = 0.7
    explainer_max_tokens: int = 1024

    # Planning settings
    adaptation_factor: float = 0.1  # weight decay applied on confidence updates
    max_plan_weeks: int = 52
    random_seed: Optional[int] = None  # pin session-type coin flips

    log_level: str = "INFO"
    log_file: Optional[str] = None

    class Config:
        env_file = str(PROJECT_ROOT / ".env")

settings = Settings()
