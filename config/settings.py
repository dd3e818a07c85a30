"""
Configuration management for the hearing transcript loader
"""
import os
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

    # Database Configuration
    database_url: str = Field(default='sqlite:///transcripts.db')
    sql_echo: bool = Field(default=False)

    # Import Configuration
    transcript_tag: str = Field(default='transcript')
    error_policy: str = Field(default='stop')  # stop, continue

    # Logging Configuration
    log_level: str = Field(default='INFO')
    log_file: str = Field(default='logs/transcript_import.log')

    @field_validator('error_policy')
    @classmethod
    def validate_error_policy(cls, v):
        valid_policies = ['stop', 'continue']
        if v.lower() not in valid_policies:
            raise ValueError(f'Error policy must be one of {valid_policies}')
        return v.lower()

    def get_log_directory(self) -> str:
        """Get the directory containing log files"""
        return os.path.dirname(self.log_file)


def get_settings() -> Settings:
    """Get application settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
