"""Mermaid validation endpoints."""

from fastapi import APIRouter

from ..models.requests import MermaidLintRequest
from ..models.responses import LintConfigResponse, MermaidLintResponse, ValidationInfo
from ...core.validator import MermaidValidator, supported_diagram_types
from ...utils.config import Config


router = APIRouter(prefix="/api/lint", tags=["Linting"])


@router.get("/config", response_model=LintConfigResponse)
async def get_lint_config():
    """Get the supported diagram types and accepted fence tags."""
    return LintConfigResponse(
        supported_types=Config.supported_types(),
        fence_tags=list(Config.DIAGRAM_FENCE_TAGS),
        diagram_types=supported_diagram_types()
    )


@router.post("/mermaid", response_model=MermaidLintResponse)
async def lint_mermaid(request: MermaidLintRequest):
    """
    Validate Mermaid syntax.

    With markdown=true every diagram embedded in the document is validated
    on its own; an invalid diagram does not affect the others.
    """
    validator = MermaidValidator()

    if request.markdown:
        results = [ValidationInfo(**entry) for entry in validator.validate_document(request.content)]
    else:
        results = [ValidationInfo(**validator.validate(request.content).to_dict())]

    return MermaidLintResponse(
        valid=all(result.is_valid for result in results),
        total_diagrams=len(results),
        results=results
    )
