"""YANG model parsing endpoints."""

from fastapi import APIRouter, HTTPException, Depends

from ..dependencies import get_file_manager
from ..models.requests import YangParseRequest, YangParseMultipleRequest
from ..models.responses import YangParseResponse, YangParseMultipleResponse, YangSummary
from ..services.file_manager import FileManager
from ...core.yang_parser import YangParser, build_dependency_graph
from ...utils.config import Config


router = APIRouter(prefix="/api/yang", tags=["YANG"])


@router.post("/parse", response_model=YangParseResponse)
async def parse_yang(request: YangParseRequest):
    """Parse and validate YANG model content, extracting its structure and metadata."""
    result = YangParser().parse(request.content, request.filename)
    return YangParseResponse(**result.to_dict())


@router.post("/parse-multiple", response_model=YangParseMultipleResponse)
async def parse_multiple_yang(request: YangParseMultipleRequest):
    """
    Parse several YANG files and map their dependencies.

    Files are validated together, so an import of a module defined by
    another file in the request resolves.
    """
    results = YangParser().parse_many([(f.name, f.content) for f in request.files])

    dependencies = {
        result.filename: result.metadata['imports']
        for result in results
        if result.metadata['imports']
    }

    return YangParseMultipleResponse(
        files=[YangParseResponse(**result.to_dict()) for result in results],
        dependencies=dependencies,
        graph=build_dependency_graph(dependencies),
        summary=YangSummary(
            total_modules=len(results),
            valid_modules=sum(1 for result in results if result.valid),
            total_errors=sum(
                1 for result in results for e in result.errors if e['severity'] == 'error'
            )
        )
    )


@router.get("/files/{file_id}", response_model=YangParseResponse)
async def parse_stored_yang(
    file_id: str,
    file_manager: FileManager = Depends(get_file_manager)
):
    """Parse an uploaded .yang file."""
    content = file_manager.read_content(file_id)
    if content is None:
        raise HTTPException(
            status_code=404,
            detail={
                "code": "FILE_NOT_FOUND",
                "message": "File not found",
                "details": f"File {file_id} does not exist"
            }
        )

    if not file_id.lower().endswith(Config.YANG_EXTENSIONS):
        raise HTTPException(
            status_code=400,
            detail={
                "code": "NOT_YANG_FILE",
                "message": "File is not a YANG model",
                "details": f"Expected one of: {', '.join(Config.YANG_EXTENSIONS)}"
            }
        )

    result = YangParser().parse(content, FileManager.original_name(file_id))
    return YangParseResponse(**result.to_dict())
