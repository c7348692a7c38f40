"""Shared FastAPI dependencies."""

from fastapi import Depends

from .models.config import APIConfig
from .services.extraction import ExtractionService
from .services.file_manager import FileManager


def get_config() -> APIConfig:
    """Get API configuration."""
    return APIConfig.from_env()


def get_file_manager(config: APIConfig = Depends(get_config)) -> FileManager:
    """Get file manager instance."""
    return FileManager(config)


def get_extraction_service(
    config: APIConfig = Depends(get_config),
    file_manager: FileManager = Depends(get_file_manager)
) -> ExtractionService:
    """Get extraction service instance."""
    return ExtractionService(config, file_manager)
