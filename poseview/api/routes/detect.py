"""Single-image pose detection endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from poseview.api.schemas.models import DetectResponse, DetectionSchema
from poseview.api.services.state import get_pipeline, run_pipeline
from poseview.core.image_sources.base import decode_image
from poseview.core.pipeline import PosePipeline

router = APIRouter()


@router.post("/detect", response_model=DetectResponse)
async def detect(request: Request, pipeline: PosePipeline = Depends(get_pipeline)) -> DetectResponse:
    """Decode an encoded image from the request body and return kept poses.

    Detections are listed in NMS order (descending confidence).
    """

    image = decode_image(await request.body())
    result = await run_in_threadpool(run_pipeline, pipeline, image)
    return DetectResponse(
        image_size=result.image_size,
        inference_ms=result.elapsed_s * 1000.0,
        candidates=len(result.detections),
        detections=[DetectionSchema.from_detection(d) for d in result.kept_detections()],
    )
