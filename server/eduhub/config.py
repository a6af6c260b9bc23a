from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration settings"""

    # Application
    app_name: str = "EduHub Platform"
    debug: bool = True
    api_version: str = "v1"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Key-value persistence
    database_url: str = "sqlite:///./eduhub.db"

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    # Admin account (synthetic, never stored in the users collection)
    admin_email: str = "admin@eduhub.local"
    admin_password: str = "change-me"
    teacher_name: str = "EduHub Teacher"

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    # Background timers
    expiry_sweep_interval_seconds: int = 60
    deadline_check_interval_seconds: int = 600
    deadline_warning_hours: int = 24

    # Exams
    default_exam_seconds: int = 60

    # Activation codes
    activation_code_length: int = 8

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
