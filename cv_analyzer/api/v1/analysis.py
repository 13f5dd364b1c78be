from fastapi import APIRouter, Depends, File, Form, UploadFile

from cv_analyzer.ai.types import ClientProvider
from cv_analyzer.api.deps import get_client_provider, get_settings
from cv_analyzer.core.config import Settings
from cv_analyzer.core.errors import UploadTooLarge, ValidationFailed
from cv_analyzer.schemas.analysis import (
    AnalyzeResponse,
    IndustryResponse,
    JobUrlsRequest,
    PostingSummaryResponse,
    QuestionsRequest,
    QuestionsResponse,
    parse_job_urls,
)
from cv_analyzer.services.analysis_service import (
    analyze_cv,
    detect_posting_industry,
    generate_questions,
    summarize_postings,
)

router = APIRouter()

VALID_PLANS = {"free", "paid"}
UPLOAD_CHUNK_BYTES = 1024 * 64


async def _read_upload(file: UploadFile, max_bytes: int) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise UploadTooLarge(f"File is too large. Maximum size is {max_bytes // (1024 * 1024)} MB.")
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    cv: UploadFile | None = File(default=None),
    job_urls: str = Form(default="", alias="jobUrls"),
    plan: str = Form(default="free"),
    additional_description: str | None = Form(default=None, alias="additionalDescription"),
    selected_industry: str | None = Form(default=None, alias="selectedIndustry"),
    settings: Settings = Depends(get_settings),
    client_provider: ClientProvider = Depends(get_client_provider),
):
    normalized_plan = (plan or "free").strip().lower()
    if normalized_plan not in VALID_PLANS:
        raise ValidationFailed("Field 'plan' must be either 'free' or 'paid'.")

    content: bytes | None = None
    filename = ""
    if cv is not None and cv.filename:
        filename = cv.filename
        content = await _read_upload(cv, settings.max_upload_bytes)

    analysis = await analyze_cv(
        cv_content=content,
        cv_filename=filename,
        job_urls=parse_job_urls(job_urls),
        plan=normalized_plan,
        additional_text=additional_description,
        selected_industry=selected_industry,
        settings=settings,
        client_provider=client_provider,
    )
    return AnalyzeResponse(status="success", analysis=analysis)


@router.post("/analyze-jd", response_model=PostingSummaryResponse)
async def analyze_job_description(
    payload: JobUrlsRequest,
    settings: Settings = Depends(get_settings),
    client_provider: ClientProvider = Depends(get_client_provider),
):
    summary = await summarize_postings(payload.job_urls, settings, client_provider)
    return PostingSummaryResponse(status="success", summary=summary)


@router.post("/generate-questions", response_model=QuestionsResponse)
async def questions(
    payload: QuestionsRequest,
    settings: Settings = Depends(get_settings),
    client_provider: ClientProvider = Depends(get_client_provider),
):
    question_set = await generate_questions(
        payload.job_urls,
        payload.plan,
        payload.selected_industry,
        settings,
        client_provider,
    )
    return QuestionsResponse(status="success", questions=question_set)


@router.post("/detect-industry", response_model=IndustryResponse)
async def industry(payload: JobUrlsRequest, settings: Settings = Depends(get_settings)):
    detection = await detect_posting_industry(payload.job_urls, settings)
    return IndustryResponse(status="success", industry=detection.industry, keyword=detection.keyword)
