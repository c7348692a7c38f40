"""File upload, content and per-file diagram endpoints."""

from typing import List, Optional
from fastapi import APIRouter, UploadFile, File, HTTPException, Depends

from ..dependencies import get_config, get_extraction_service, get_file_manager
from ..models.config import APIConfig
from ..models.requests import UpdateContentRequest
from ..models.responses import (
    StoredFileInfo, UploadResponse, FileContentResponse, MessageResponse,
    DiagramListResponse, DiagramDetailResponse, DocumentResponse
)
from ..services.extraction import ExtractionService
from ..services.file_manager import FileManager


router = APIRouter(prefix="/api/files", tags=["Files"])

UPLOAD_CHUNK_SIZE = 64 * 1024


def _file_not_found(file_id: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={
            "code": "FILE_NOT_FOUND",
            "message": "File not found",
            "details": f"File {file_id} does not exist"
        }
    )


async def read_limited(upload: UploadFile, max_bytes: int) -> Optional[bytes]:
    """Read an upload in chunks; None once it grows past max_bytes."""
    data = bytearray()
    while True:
        chunk = await upload.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            return bytes(data)
        data.extend(chunk)
        if len(data) > max_bytes:
            return None


@router.get("", response_model=List[StoredFileInfo])
async def list_files(file_manager: FileManager = Depends(get_file_manager)):
    """List all uploaded files, newest first."""
    return [StoredFileInfo(**info) for info in file_manager.list_files()]


@router.post("/upload", response_model=UploadResponse)
async def upload_files(
    files: Optional[List[UploadFile]] = File(None, description="Files to upload (.md, .mmd, .mermaid, .yang)"),
    config: APIConfig = Depends(get_config),
    file_manager: FileManager = Depends(get_file_manager)
):
    """
    Upload one or more files.

    Every file is checked before any is stored, so a rejected request
    leaves storage untouched.
    """

    if not files:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "NO_FILES",
                "message": "No files uploaded",
                "details": None
            }
        )

    if len(files) > config.max_files_per_upload:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "TOO_MANY_FILES",
                "message": f"At most {config.max_files_per_upload} files can be uploaded at once",
                "details": f"Received {len(files)} files"
            }
        )

    payloads = []
    for upload in files:
        filename = upload.filename or ""
        if not file_manager.is_allowed(filename):
            raise HTTPException(
                status_code=400,
                detail={
                    "code": "INVALID_FILE_FORMAT",
                    "message": "File type not supported",
                    "details": f"Received filename: {filename}. "
                               f"Allowed types: {', '.join(config.allowed_extensions)}"
                }
            )

        data = await read_limited(upload, config.max_file_size_mb * 1024 * 1024)
        if data is None:
            raise HTTPException(
                status_code=413,
                detail={
                    "code": "FILE_TOO_LARGE",
                    "message": f"File size exceeds limit of {config.max_file_size_mb}MB",
                    "details": f"Received filename: {filename}"
                }
            )
        payloads.append((filename, data))

    stored = [StoredFileInfo(**file_manager.save_file(name, data)) for name, data in payloads]
    file_manager.enforce_storage_limits()

    return UploadResponse(
        message=f"Successfully uploaded {len(stored)} file(s)",
        files=stored
    )


@router.get("/{file_id}/content", response_model=FileContentResponse)
async def get_file_content(
    file_id: str,
    file_manager: FileManager = Depends(get_file_manager)
):
    """Get the text content of a file."""
    content = file_manager.read_content(file_id)
    if content is None:
        raise _file_not_found(file_id)
    return FileContentResponse(content=content)


@router.put("/{file_id}/content", response_model=MessageResponse)
async def update_file_content(
    file_id: str,
    request: UpdateContentRequest,
    file_manager: FileManager = Depends(get_file_manager)
):
    """Replace the content of an existing file."""
    if not file_manager.write_content(file_id, request.content):
        raise _file_not_found(file_id)
    return MessageResponse(message="File updated successfully")


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: str,
    file_manager: FileManager = Depends(get_file_manager)
):
    """Delete an uploaded file."""
    if not file_manager.delete_file(file_id):
        raise _file_not_found(file_id)
    return MessageResponse(message="File deleted successfully")


@router.get("/{file_id}/diagrams", response_model=DiagramListResponse)
async def list_diagrams(
    file_id: str,
    extraction_service: ExtractionService = Depends(get_extraction_service)
):
    """
    Extract all Mermaid diagrams from a file.

    Markdown files may hold any number of diagrams; .mmd and .mermaid
    files are returned as a single diagram.
    """
    diagrams = extraction_service.extract_from_file(file_id)
    if diagrams is None:
        raise _file_not_found(file_id)

    return DiagramListResponse(
        file_id=file_id,
        total_diagrams=len(diagrams),
        diagrams=diagrams
    )


@router.get("/{file_id}/diagrams/{index}", response_model=DiagramDetailResponse)
async def get_diagram(
    file_id: str,
    index: int,
    extraction_service: ExtractionService = Depends(get_extraction_service)
):
    """Get one diagram of a file with previous/next navigation."""
    if index < 0:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "INVALID_INDEX",
                "message": "Invalid diagram index",
                "details": f"Received index: {index}"
            }
        )

    result = extraction_service.get_diagram(file_id, index)
    if result is None:
        raise _file_not_found(file_id)

    if "diagram" not in result:
        raise HTTPException(
            status_code=404,
            detail={
                "code": "DIAGRAM_NOT_FOUND",
                "message": f"Diagram {index} not found",
                "details": f"File contains {result['total']} diagram(s)"
            }
        )

    return DiagramDetailResponse(
        file_id=file_id,
        diagram=result["diagram"],
        navigation=result["navigation"]
    )


@router.get("/{file_id}/document", response_model=DocumentResponse)
async def get_document(
    file_id: str,
    extraction_service: ExtractionService = Depends(get_extraction_service)
):
    """Get the parsed structure of a Markdown file for the document view."""
    document = extraction_service.parse_document(file_id)
    if document is None:
        raise _file_not_found(file_id)
    return DocumentResponse(file_id=file_id, document=document)
