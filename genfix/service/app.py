"""FastAPI application entrypoint for genfix service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..models import SourceFile
from ..orchestrator import Pipeline, PipelineResult


class FilePayload(BaseModel):
    path: str
    content: str
    language: Optional[str] = None


class ExtractRequest(BaseModel):
    text: str
    escalate: Optional[bool] = None


class FixRequest(BaseModel):
    files: List[FilePayload]
    escalate: Optional[bool] = None
    strict_scope: Optional[bool] = None
    allowed_paths: Optional[List[str]] = None


class ValidateRequest(BaseModel):
    files: List[FilePayload]


class PipelineResponse(BaseModel):
    summary: Dict[str, Any]
    files: List[FilePayload]


class FindingPayload(BaseModel):
    path: str
    messages: List[str]


class ValidateResponse(BaseModel):
    valid: bool
    findings: List[FindingPayload] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    version: str


def _default_pipeline() -> Pipeline:
    return Pipeline()


def _to_sources(files: List[FilePayload]) -> List[SourceFile]:
    return [
        SourceFile(path=file.path, content=file.content, language=file.language or "")
        for file in files
    ]


def _to_response(result: PipelineResult) -> PipelineResponse:
    return PipelineResponse(
        summary=result.summary(),
        files=[
            FilePayload(path=file.path, content=file.content, language=file.language)
            for file in result.files
        ],
    )


async def _run_blocking(func: Callable[[], Any]) -> Any:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:  # pragma: no cover - fallback path when not in async context
        return func()
    return await loop.run_in_executor(None, func)


def create_app(
    pipeline_factory: Callable[[], Pipeline] = _default_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing the repair pipeline."""

    app = FastAPI(title="GenFix Service", version=__version__)

    async def get_pipeline() -> Pipeline:
        return pipeline_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    @app.post("/extract", response_model=PipelineResponse)
    async def extract(
        payload: ExtractRequest,
        pipeline: Pipeline = Depends(get_pipeline),
    ) -> PipelineResponse:
        result = await _run_blocking(
            lambda: pipeline.run_text(payload.text, escalate=payload.escalate)
        )
        return _to_response(result)

    @app.post("/fix", response_model=PipelineResponse)
    async def fix(
        payload: FixRequest,
        pipeline: Pipeline = Depends(get_pipeline),
    ) -> PipelineResponse:
        files = _to_sources(payload.files)
        result = await _run_blocking(
            lambda: pipeline.run_files(
                files,
                escalate=payload.escalate,
                strict_scope=payload.strict_scope,
                allowed_paths=payload.allowed_paths,
            )
        )
        return _to_response(result)

    @app.post("/validate", response_model=ValidateResponse)
    async def validate(
        payload: ValidateRequest,
        pipeline: Pipeline = Depends(get_pipeline),
    ) -> ValidateResponse:
        files = _to_sources(payload.files)
        findings = await _run_blocking(lambda: pipeline.validate(files))
        return ValidateResponse(
            valid=not findings,
            findings=[
                FindingPayload(path=finding.path, messages=list(finding.messages))
                for finding in findings
            ],
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
