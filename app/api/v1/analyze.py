from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from app.ai.factory import get_completion_client
from app.ai.types import CompletionClient
from app.core.config import settings
from app.core.rate_limit import llm_rate_limit
from app.parsing.models import UnsupportedFormatError
from app.schemas.analysis import INTENSITIES, AnalysisResult
from app.services.analysis_service import EmptyResumeError, analyze_upload

router = APIRouter()

_READ_CHUNK = 1024 * 64


async def _read_limited(upload: UploadFile, max_bytes: int) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await upload.read(_READ_CHUNK)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {max_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


def _resolve_intensity(*values: str | None) -> str:
    raw = next((value for value in values if value and value.strip()), "medium")
    intensity = raw.strip().lower()
    if intensity not in INTENSITIES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown intensity '{raw}'. Allowed: {', '.join(INTENSITIES)}.",
        )
    return intensity


def require_upload(
    file: UploadFile | None = File(default=None),
    resume: UploadFile | None = File(default=None),
) -> UploadFile:
    upload = file or resume
    if upload is None or not upload.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    return upload


def require_intensity(
    intensity: str | None = Form(default=None),
    roast_intensity: str | None = Form(default=None, alias="roastIntensity"),
) -> str:
    return _resolve_intensity(roast_intensity, intensity)


# Dependencies resolve in declaration order: request checks run before the client is built.
@router.post("/analyze", response_model=AnalysisResult)
@llm_rate_limit()
async def analyze(
    request: Request,
    upload: UploadFile = Depends(require_upload),
    level: str = Depends(require_intensity),
    job_position: str | None = Form(default=None, alias="jobPosition"),
    job_field: str | None = Form(default=None, alias="jobField"),
    client: CompletionClient = Depends(get_completion_client),
):
    _ = request
    content = await _read_limited(upload, settings.max_upload_bytes)
    try:
        return await analyze_upload(
            client,
            filename=upload.filename,
            content=content,
            intensity=level,
            job_position=job_position,
            job_field=job_field,
        )
    except (UnsupportedFormatError, EmptyResumeError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
