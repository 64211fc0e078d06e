"""FastAPI application exposing predictions for CI pipelines."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..errors import NostradiffmusError
from ..git.sampler import sample_diff
from ..models import AnalysisOutcome
from ..orchestrator import Orchestrator
from ..output.report import PredictionReport


class PredictRequest(BaseModel):
    diff: str
    files: Optional[List[str]] = None
    use_advisory: bool = False


class SampleRequest(BaseModel):
    diff: str
    max_chars: int = Field(gt=0)


class SampleResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    truncated: str
    was_truncated: bool = Field(alias="wasTruncated")
    original_size: int = Field(alias="originalSize")
    truncated_size: int = Field(alias="truncatedSize")


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing nostradiffmus operations."""

    app = FastAPI(title="Nostradiffmus Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/predict")
    async def predict(
        payload: PredictRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> JSONResponse:
        def _analyze() -> AnalysisOutcome:
            return orchestrator.analyze_text(
                payload.diff, payload.files, use_advisory=payload.use_advisory
            )

        # Advisory calls block on a subprocess; keep them off the event loop.
        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _analyze)
        report = PredictionReport.from_outcome(outcome)
        return JSONResponse(content=report.model_dump(by_alias=True, exclude_none=True))

    @app.post("/sample")
    async def sample(payload: SampleRequest) -> JSONResponse:
        result = sample_diff(payload.diff, payload.max_chars)
        response = SampleResponse(
            truncated=result.truncated,
            was_truncated=result.was_truncated,
            original_size=result.original_size,
            truncated_size=result.truncated_size,
        )
        return JSONResponse(content=response.model_dump(by_alias=True))

    @app.exception_handler(NostradiffmusError)
    async def nostradiffmus_error_handler(
        _: Any, exc: NostradiffmusError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
