"""Request models for the API."""

from typing import List
from pydantic import BaseModel, Field


class ContentRequest(BaseModel):
    """Request body carrying document text."""
    content: str = Field(..., description="Markdown document text")


class UpdateContentRequest(BaseModel):
    """New content for a stored file."""
    content: str = Field(..., description="Replacement file content")


class MermaidLintRequest(BaseModel):
    """Mermaid validation request."""
    content: str = Field(..., description="Mermaid definition or Markdown document")
    markdown: bool = Field(
        default=False,
        description="Treat content as Markdown and validate each embedded diagram"
    )


class YangParseRequest(BaseModel):
    """YANG parsing request."""
    content: str = Field(..., description="YANG model content to parse")
    filename: str = Field(default="temp.yang", description="Filename reported with the result")


class YangFile(BaseModel):
    """One file of a multi-file YANG request."""
    name: str = Field(..., description="Filename")
    content: str = Field(..., description="YANG file content")


class YangParseMultipleRequest(BaseModel):
    """Several YANG files parsed together so their imports resolve."""
    files: List[YangFile] = Field(..., description="YANG files to parse")
