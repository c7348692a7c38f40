"""Configuration models for the API."""

from pydantic import BaseModel, Field
import os


class APIConfig(BaseModel):
    """API configuration settings."""

    # Server settings
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=3000, description="Port to bind to")
    environment: str = Field(default="development", description="development or production")

    # File management
    upload_dir: str = Field(default="uploads", description="Directory holding uploaded files")
    max_stored_files: int = Field(default=500, description="Maximum number of stored files")

    # Upload limits
    max_file_size_mb: int = Field(default=10, description="Maximum upload file size in MB")
    max_files_per_upload: int = Field(default=10, description="Maximum files per upload request")
    allowed_extensions: list = Field(
        default=[".md", ".mmd", ".mermaid", ".yang"],
        description="Accepted upload file extensions"
    )

    # Security
    rate_limit: str = Field(
        default="1000/15 minutes",
        description="Requests allowed per client address, in limits notation"
    )
    cors_origins: list = Field(
        default=["http://localhost:5173", "http://127.0.0.1:5173"],
        description="CORS allowed origins"
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "APIConfig":
        """Create config from environment variables."""
        return cls(
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("API_PORT", "3000")),
            environment=os.getenv("ENVIRONMENT", "development"),
            upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
            max_stored_files=int(os.getenv("MAX_STORED_FILES", "500")),
            max_file_size_mb=int(os.getenv("MAX_FILE_SIZE_MB", "10")),
            max_files_per_upload=int(os.getenv("MAX_FILES_PER_UPLOAD", "10")),
            rate_limit=os.getenv("RATE_LIMIT", "1000/15 minutes"),
            cors_origins=os.getenv(
                "CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
            ).split(","),
        )
