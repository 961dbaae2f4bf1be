"""FastAPI application entrypoint."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from poseview.api.routes import config, detect, health
from poseview.core.errors import ImageLoadError, ModelLoadError, ShapeError


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler.

    Drops the loaded pipeline when the app shuts down.
    """

    from poseview.api.services.state import reset_pipeline

    yield
    reset_pipeline()


app = FastAPI(title="poseview API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(config.router)
app.include_router(detect.router)


@app.exception_handler(ImageLoadError)
@app.exception_handler(ShapeError)
async def _bad_input_handler(_: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ModelLoadError)
async def _model_unavailable_handler(_: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": str(exc)})


if __name__ == "__main__":
    uvicorn.run("poseview.api.main:app", host="0.0.0.0", port=8000, reload=True)
