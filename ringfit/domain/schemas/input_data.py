from typing import Optional

from pydantic import AnyHttpUrl, BaseModel, Field


class RecordRequest(BaseModel):
    """Request body posted by the shortcut/webhook: ``{"url": "..."}``."""

    url: AnyHttpUrl


class ProcessingOptions(BaseModel):
    """Flags that control how the pipeline treats a batch of images."""

    # keep going after an image fails instead of halting the batch
    continue_on_error: bool = False
    # extract only, never call the metrics recorder
    dry_run: bool = False


class RequestContext(BaseModel):
    request_id: Optional[str] = None
    source: str = Field(default="cli")
