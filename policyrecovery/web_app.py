from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from .config import Settings, load_settings
from .dates import parse_dashboard_date
from .errors import DashboardError
from .lookup import PolicyIndex
from .matcher import is_csv_filename, run_next_cleared_batch
from .report import build_report_file
from .status import classify_status

logger = logging.getLogger(__name__)

DOWNLOAD_FORMATS = ("csv", "txt")


class PolicySearchOut(BaseModel):
    found: bool
    indexed: int
    policy_number: str
    policy: dict[str, Any] | None = None
    status_category: str | None = None


async def _read_upload(upload: UploadFile) -> str:
    content = await upload.read()
    return content.decode("utf-8-sig", errors="replace")


def _require_extension(upload: UploadFile, allowed: tuple[str, ...], label: str) -> None:
    name = (upload.filename or "").lower()
    if not name.endswith(allowed):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type: please upload a {' or '.join(e.lstrip('.').upper() for e in allowed)} file for the {label}.",
        )


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_web_app(settings: Settings | None = None) -> FastAPI:
    project_root = Path(__file__).resolve().parents[1]
    load_dotenv(project_root / ".env", override=False)
    settings = settings or load_settings()
    _configure_logging(settings)

    app = FastAPI(title="Policy Recovery Service")
    app.state.settings = settings

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/next-cleared-batch")
    async def next_cleared_batch(
        dashboard_file: UploadFile = File(...),
        cleared_batch_file: UploadFile = File(...),
        format: str = Form(default="json"),
        as_of: str | None = Form(default=None),
    ) -> Response:
        _require_extension(dashboard_file, (".csv",), "daily dashboard")
        _require_extension(cleared_batch_file, (".csv", ".txt"), "cleared batch")

        fmt = format.strip().lower()
        if fmt not in ("json", *DOWNLOAD_FORMATS):
            raise HTTPException(status_code=400, detail=f"Invalid download format: {format}")

        as_of_date = None
        if as_of and as_of.strip():
            as_of_date = parse_dashboard_date(as_of)
            if as_of_date is None:
                raise HTTPException(status_code=400, detail=f"Invalid as_of date: {as_of}")

        try:
            result = run_next_cleared_batch(
                await _read_upload(dashboard_file),
                await _read_upload(cleared_batch_file),
                batch_is_csv=is_csv_filename(cleared_batch_file.filename),
                as_of=as_of_date,
                settings=settings,
            )
        except DashboardError as exc:
            logger.warning("Next cleared batch rejected: %s", exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        if fmt == "json":
            return JSONResponse(result.to_dict())

        if not result.records:
            raise HTTPException(status_code=404, detail=result.message)

        report = build_report_file(
            result,
            fmt,
            purpose=settings.report_purpose,
            excluded_columns=settings.excluded_report_columns,
        )
        return Response(
            content=report.content,
            media_type=report.media_type,
            headers={"Content-Disposition": f'attachment; filename="{report.filename}"'},
        )

    @app.post("/api/policy-search")
    async def policy_search(
        dashboard_file: UploadFile = File(...),
        policy_number: str = Form(...),
    ) -> JSONResponse:
        _require_extension(dashboard_file, (".csv",), "policy sheet")
        try:
            index = PolicyIndex.from_dashboard(await _read_upload(dashboard_file), settings=settings)
        except DashboardError as exc:
            logger.warning("Policy search upload rejected: %s", exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        record = index.find(policy_number)
        payload = PolicySearchOut(
            found=record is not None,
            indexed=len(index),
            policy_number=policy_number.strip(),
            policy=record.to_dict() if record else None,
            status_category=classify_status(record.status).value if record else None,
        )
        return JSONResponse(payload.model_dump())

    return app
