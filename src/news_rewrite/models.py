"""Pydantic models for articles moving through the rewrite pipeline."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArticleStub(BaseModel):
    """Headline and link of a candidate article from the feed or listing page."""

    title: str
    link: str

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("link")
    @classmethod
    def link_is_absolute(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("link must be an absolute http(s) URL")
        return v


class RewrittenArticle(BaseModel):
    """Rewritten title, body and image link, ready to publish."""

    title: str
    body: str
    image_url: str | None = None


class ContentRecord(BaseModel):
    """A published article as persisted by the publish endpoint."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str
    image_url: str | None = None
    slug: str
    published_at: datetime
    created_at: datetime
    updated_at: datetime

    @field_validator("slug")
    @classmethod
    def slug_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("slug must not be empty")
        return v


class ArticleStage(str, Enum):
    """Stages an article passes through, in order."""

    FETCHED = "fetched"
    EXTRACTED = "extracted"
    REWRITTEN = "rewritten"
    TITLED = "titled"
    IMAGED = "imaged"
    PUBLISHED = "published"
    FAILED = "failed"


class ArticleOutcome(BaseModel):
    """Result of running one article through the pipeline."""

    stub: ArticleStub
    stage: ArticleStage = ArticleStage.FETCHED
    failed_stage: ArticleStage | None = None
    error: str | None = None
    record: ContentRecord | None = None

    @property
    def succeeded(self) -> bool:
        """True once the article reached the publish stage."""
        return self.stage is ArticleStage.PUBLISHED


class RunSummary(BaseModel):
    """Counts reported at the end of a batch run."""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    outcomes: list[ArticleOutcome] = Field(default_factory=list)

    @property
    def success_rate(self) -> int:
        """Percentage of processed articles that were published, rounded."""
        if self.processed == 0:
            return 0
        return round(self.succeeded / self.processed * 100)

    def add(self, outcome: ArticleOutcome) -> None:
        """Record one article outcome and update the counts."""
        self.outcomes.append(outcome)
        self.processed += 1
        if outcome.succeeded:
            self.succeeded += 1
        else:
            self.failed += 1

    def as_dict(self) -> dict[str, int]:
        """Counts as reported by the CLI and the Lambda response body."""
        return {
            "articles_processed": self.processed,
            "articles_succeeded": self.succeeded,
            "articles_failed": self.failed,
            "success_rate": self.success_rate,
        }
