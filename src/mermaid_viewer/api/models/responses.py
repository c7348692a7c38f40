"""Response models for the API."""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class CamelModel(BaseModel):
    """Base model serialized with the camelCase keys the browser client uses."""
    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    environment: str
    uptime: float


class StoredFileInfo(BaseModel):
    """Information about an uploaded file."""
    id: str
    name: str
    size: int
    modified: datetime
    type: str  # "markdown", "mermaid" or "yang"
    extension: str


class UploadResponse(BaseModel):
    """Response from the upload endpoint."""
    message: str
    files: List[StoredFileInfo]


class FileContentResponse(BaseModel):
    """Raw file content."""
    content: str


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


class DiagramInfo(CamelModel):
    """A diagram extracted from a file or request body."""
    content: str
    index: int
    title: str
    start_line: int = Field(alias="startLine")
    end_line: int = Field(alias="endLine")
    raw_block: str = Field(alias="rawBlock")


class DiagramListResponse(CamelModel):
    """All diagrams of a stored file."""
    file_id: str = Field(alias="fileId")
    total_diagrams: int = Field(alias="totalDiagrams")
    diagrams: List[DiagramInfo]


class DiagramNavigation(CamelModel):
    """Previous/next navigation around one diagram."""
    current: int
    total: int
    has_previous: bool = Field(alias="hasPrevious")
    has_next: bool = Field(alias="hasNext")
    previous_index: Optional[int] = Field(default=None, alias="previousIndex")
    next_index: Optional[int] = Field(default=None, alias="nextIndex")


class DiagramDetailResponse(CamelModel):
    """One diagram of a stored file."""
    file_id: str = Field(alias="fileId")
    diagram: DiagramInfo
    navigation: DiagramNavigation


class ExtractionResponse(CamelModel):
    """Diagrams extracted from a request body."""
    total_diagrams: int = Field(alias="totalDiagrams")
    diagrams: List[DiagramInfo]


class RawExtractionResponse(CamelModel):
    """Diagram bodies extracted from a request body."""
    total_diagrams: int = Field(alias="totalDiagrams")
    diagrams: List[str]


class DocumentResponse(CamelModel):
    """Parsed document structure of a stored file."""
    file_id: str = Field(alias="fileId")
    document: Dict[str, Any]


class ValidationInfo(CamelModel):
    """Validation outcome for one diagram."""
    is_valid: bool = Field(alias="isValid")
    diagram_type: Optional[str] = Field(default=None, alias="diagramType")
    errors: List[str]
    warnings: List[str]
    index: Optional[int] = None
    title: Optional[str] = None
    start_line: Optional[int] = Field(default=None, alias="startLine")


class MermaidLintResponse(CamelModel):
    """Mermaid validation response."""
    valid: bool
    total_diagrams: int = Field(alias="totalDiagrams")
    results: List[ValidationInfo]


class LintConfigResponse(CamelModel):
    """Validation configuration exposed to the client."""
    supported_types: List[str] = Field(alias="supportedTypes")
    fence_tags: List[str] = Field(alias="fenceTags")
    diagram_types: List[Dict[str, str]] = Field(alias="diagramTypes")


class ErrorResponse(BaseModel):
    """Error response model."""
    success: bool = False
    error: Dict[str, Any]
    timestamp: datetime


class YangParseResponse(BaseModel):
    """Structure and problems of one YANG file."""
    filename: str
    valid: bool
    tree: Dict[str, Any]
    modules: List[Dict[str, Any]]
    errors: List[Dict[str, Any]]
    metadata: Dict[str, Any]
    parser: str


class YangSummary(CamelModel):
    """Totals over a multi-file YANG request."""
    total_modules: int = Field(alias="totalModules")
    valid_modules: int = Field(alias="validModules")
    total_errors: int = Field(alias="totalErrors")


class YangParseMultipleResponse(CamelModel):
    """Per-file results plus the import graph between them."""
    files: List[YangParseResponse]
    dependencies: Dict[str, List[str]]
    graph: Dict[str, List[Dict[str, str]]]
    summary: YangSummary
