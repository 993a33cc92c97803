from __future__ import annotations

import uuid

from fastapi import APIRouter, File, HTTPException, Query, Request, UploadFile
from pydantic import BaseModel

from ringfit.domain.schemas.image_data import ImageData
from ringfit.domain.schemas.input_data import ProcessingOptions, RecordRequest, RequestContext
from ringfit.domain.schemas.result_data import ImageResult, ResultData
from ringfit.lib.errors import CollaboratorError, RingfitError
from ringfit.lib.logger import get_logger
from ringfit.service.pipeline_service import PipelineService


router = APIRouter()
logger = get_logger("http")


class RecordResponse(BaseModel):
    status: str
    message: str
    result: ResultData


def _pipeline(request: Request) -> PipelineService:
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        pipeline = PipelineService()
        request.app.state.pipeline = pipeline
    return pipeline


@router.post("/record", summary="Extract workout fields from a post's screenshot and record them", response_model=RecordResponse)
def record(
    body: RecordRequest,
    request: Request,
    dry_run: bool = Query(default=False, description="Extract only, do not write to Pixela"),
    continue_on_error: bool = Query(default=False, description="Keep processing images after one fails"),
) -> RecordResponse:
    pipeline = _pipeline(request)
    context = RequestContext(request_id=request.headers.get("X-Request-ID") or uuid.uuid4().hex, source="http")
    options = ProcessingOptions(dry_run=dry_run, continue_on_error=continue_on_error or pipeline.settings.continue_on_error)

    try:
        result = pipeline.run(body, options, context)
    except RingfitError as e:
        logger.error("record failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Record failed: {e}") from e

    if not result.ok:
        raise HTTPException(status_code=500, detail="Record failed")
    message = "Extracted (dry run)" if dry_run else "Successfully recorded"
    return RecordResponse(status="ok", message=message, result=result)


@router.post("/extract", summary="Run OCR and field extraction on an uploaded screenshot", response_model=ImageResult)
async def extract(
    request: Request,
    file: UploadFile = File(..., description="Summary-screen screenshot"),
) -> ImageResult:
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="empty upload")
    image = ImageData(content=content, url=file.filename, content_type=file.content_type)
    try:
        return _pipeline(request).extract(image)
    except CollaboratorError as e:
        raise HTTPException(status_code=500, detail=f"extraction failed: {e}") from e
