from pydantic_settings import BaseSettings
from typing import List, Optional, Union
from pydantic import field_validator
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "RecruitFlow API"

    # Database Settings
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "recruitflow_db"

    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Auth Settings
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 30
    REMEMBER_ME_EXPIRE_DAYS: int = 90

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # Storage Settings (S3 or any S3-compatible store such as MinIO)
    USE_S3: bool = False
    S3_BUCKET_NAME: str = ""
    S3_ENDPOINT_URL: Optional[str] = None
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "us-east-1"
    LOCAL_STORAGE_DIR: str = "uploads"

    # Email Settings (Resend)
    RESEND_API_KEY: str = ""
    RESEND_FROM_EMAIL: str = "noreply@example.com"
    RESEND_FROM_NAME: str = "RecruitFlow"
    COMPANY_NAME: str = "RecruitFlow"

    # External CV analysis workflow (receives new submissions)
    ANALYSIS_WEBHOOK_URL: Optional[str] = None

    # Uploads
    MAX_UPLOAD_SIZE_MB: int = 10

    # Scheduling
    DEFAULT_INTERVIEW_MINUTES: int = 60

    # Initial Head HR account (create_head_hr.py)
    HEAD_HR_EMAIL: str = "head.hr@example.com"
    HEAD_HR_PASSWORD: str = "ChangeMe123!"
    HEAD_HR_NAME: str = "Head HR"

    # CORS Settings - can be set as JSON string in .env
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["http://localhost:5173", "http://localhost:3000"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Parse CORS origins from JSON string or list"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [origin.strip() for origin in v.split(",")]
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
