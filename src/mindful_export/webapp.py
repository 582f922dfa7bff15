"""FastAPI application that accepts an export upload and returns the Bloom CSV."""

from __future__ import annotations

import io
import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict

from .config import ExtractorSettings, TimestampPolicy
from .errors import FormatError, MindfulExportError, ParseError, RangeError
from .models import ExtractionResult, ExtractionStatus
from .pipeline import export_result, extract_records, summarize
from .reporting import count_by_app

logger = logging.getLogger(__name__)


class AppCount(BaseModel):
    app_name: str
    count: int


class ExtractionResponse(BaseModel):
    status: ExtractionStatus
    summary: str
    entries: list[AppCount]
    exported_rows: int
    filename: Optional[str] = None
    csv: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


def create_app(*, settings: Optional[ExtractorSettings] = None) -> FastAPI:
    """Instantiate the FastAPI application."""
    base_settings = settings or ExtractorSettings()

    app = FastAPI(title="Mindful Export", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _settings_for(skip_bad_timestamps: bool) -> ExtractorSettings:
        policy = TimestampPolicy.SKIP if skip_bad_timestamps else base_settings.timestamp_policy
        return replace(base_settings, timestamp_policy=policy)

    @app.get("/api/status")
    def status() -> Dict[str, Any]:
        return {"status": "ok", "session_type": base_settings.session_type}

    @app.post("/api/extract", response_model=ExtractionResponse)
    async def extract(
        request: Request,
        skip_bad_timestamps: bool = Query(False),
    ) -> ExtractionResponse:
        settings = _settings_for(skip_bad_timestamps)
        result, body = await run_in_threadpool(_run, await request.body(), settings)
        return ExtractionResponse(
            status=result.status,
            summary=result.summary,
            entries=[
                AppCount(app_name=app_name, count=count)
                for app_name, count in count_by_app(result.records)
            ],
            exported_rows=result.exported_rows,
            filename=settings.output_name if body is not None else None,
            csv=body,
        )

    @app.post("/api/extract.csv")
    async def extract_csv(
        request: Request,
        skip_bad_timestamps: bool = Query(False),
    ) -> Response:
        settings = _settings_for(skip_bad_timestamps)
        result, body = await run_in_threadpool(_run, await request.body(), settings)
        if body is None:
            raise HTTPException(status_code=404, detail="No Mindful Session entries found.")
        return Response(
            content=body,
            media_type="text/csv",
            headers={
                "Content-Disposition": f'attachment; filename="{settings.output_name}"',
                "X-Exported-Rows": str(result.exported_rows),
            },
        )

    return app


def _run(payload: bytes, settings: ExtractorSettings) -> tuple[ExtractionResult, Optional[str]]:
    if not payload:
        raise HTTPException(status_code=400, detail="Request body must contain export.xml")
    try:
        result = summarize(extract_records(payload, settings))
        if result.status is ExtractionStatus.EMPTY:
            return result, None
        buffer = io.StringIO()
        export_result(result, buffer, settings)
    except ParseError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (FormatError, RangeError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except MindfulExportError as exc:
        logger.exception("Extraction failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    result.destination = settings.output_name
    return result, buffer.getvalue()
