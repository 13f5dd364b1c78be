from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Plan = Literal["free", "paid"]


@dataclass(frozen=True)
class OutputSizing:
    plan: Plan
    num_soft: int
    num_hard: int
    summary_cap: int
    item_cap: int = 300
    question_cap: int = 300
    max_list_items: int = 10
    max_output_tokens: int = 1500


PLAN_SIZING: dict[str, OutputSizing] = {
    "free": OutputSizing(plan="free", num_soft=2, num_hard=2, summary_cap=800, max_output_tokens=1500),
    "paid": OutputSizing(plan="paid", num_soft=7, num_hard=10, summary_cap=1600, max_output_tokens=3500),
}


def sizing_for_plan(plan: str | None) -> OutputSizing:
    return PLAN_SIZING.get((plan or "free").strip().lower(), PLAN_SIZING["free"])


def parse_job_urls(raw: Any) -> list[str]:
    """Accept a JSON array, a list, or a newline/comma separated string."""
    if raw is None:
        return []
    values: list[Any]
    if isinstance(raw, (list, tuple)):
        values = list(raw)
    else:
        text = str(raw).strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except ValueError:
                decoded = None
            if isinstance(decoded, list):
                values = decoded
            else:
                values = re.split(r"[\n,]+", text.strip("[]"))
        else:
            values = re.split(r"[\n,]+", text)
    urls: list[str] = []
    for value in values:
        url = str(value or "").strip().strip("\"'")
        if url and url not in urls:
            urls.append(url)
    return urls


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JobPosting(BaseModel):
    url: str
    text: str
    fetched: bool = True
    error: str | None = None


class AnalysisRequest(BaseModel):
    cv_text: str = ""
    additional_text: str | None = None
    postings: list[JobPosting] = Field(default_factory=list)
    plan: Plan = "free"
    selected_industry: str | None = None


class AnalysisResult(CamelModel):
    summary: str = ""
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    soft_questions: list[str] = Field(default_factory=list)
    hard_questions: list[str] = Field(default_factory=list)
    match_percentage: int = Field(default=0, ge=0, le=100)
    warning_mismatch: bool = False
    meta: dict[str, Any] = Field(default_factory=dict)


class QuestionSet(CamelModel):
    soft_questions: list[str] = Field(default_factory=list)
    hard_questions: list[str] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)


class PostingStatus(BaseModel):
    url: str
    fetched: bool


class PostingSummary(CamelModel):
    title: str = ""
    company: str = ""
    summary: str = ""
    requirements: list[str] = Field(default_factory=list)
    responsibilities: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    postings: list[PostingStatus] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)


class JobUrlsRequest(CamelModel):
    job_urls: list[str] = Field(default_factory=list)

    @field_validator("job_urls", mode="before")
    @classmethod
    def _coerce_job_urls(cls, value: Any) -> list[str]:
        return parse_job_urls(value)


class QuestionsRequest(JobUrlsRequest):
    plan: Plan = "free"
    selected_industry: str | None = Field(default=None, max_length=120)


class AnalyzeResponse(BaseModel):
    status: str = "success"
    analysis: AnalysisResult


class PostingSummaryResponse(BaseModel):
    status: str = "success"
    summary: PostingSummary


class QuestionsResponse(BaseModel):
    status: str = "success"
    questions: QuestionSet


class IndustryResponse(BaseModel):
    status: str = "success"
    industry: str | None = None
    keyword: str | None = None


class ContactRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=200)
    message: str = Field(min_length=1, max_length=5000)


class ContactResponse(BaseModel):
    status: str = "ok"
    email_sent: bool = False
