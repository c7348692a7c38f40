"""Extraction endpoints for Markdown sent in the request body."""

from fastapi import APIRouter, Depends

from ..dependencies import get_extraction_service
from ..models.requests import ContentRequest
from ..models.responses import ExtractionResponse, RawExtractionResponse
from ..services.extraction import ExtractionService


router = APIRouter(prefix="/api/extract", tags=["Extraction"])


@router.post("", response_model=ExtractionResponse)
async def extract_diagrams(
    request: ContentRequest,
    extraction_service: ExtractionService = Depends(get_extraction_service)
):
    """
    Extract Mermaid diagrams from Markdown text.

    Each diagram carries its title and the 0-based source lines of its
    opening and closing fences.
    """
    diagrams = extraction_service.extract_from_text(request.content)
    return ExtractionResponse(total_diagrams=len(diagrams), diagrams=diagrams)


@router.post("/raw", response_model=RawExtractionResponse)
async def extract_raw_diagrams(
    request: ContentRequest,
    extraction_service: ExtractionService = Depends(get_extraction_service)
):
    """Extract only the diagram bodies from Markdown text."""
    diagrams = extraction_service.extract_raw_from_text(request.content)
    return RawExtractionResponse(total_diagrams=len(diagrams), diagrams=diagrams)
