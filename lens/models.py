"""
Pydantic models shared across the Audience Lens core.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

#: Placeholder owner stamped on every audience until accounts exist.
DEFAULT_OWNER = "Me"


# ── Audiences ──────────────────────────────────────────────────────────────


class AudienceFields(BaseModel):
    """The user-editable part of an audience profile."""

    name: str
    demographics: str = ""
    interests: str = ""
    behaviors: str = ""

    @model_validator(mode="after")
    def _check_descriptive(self) -> AudienceFields:
        if not self.name.strip():
            raise ValueError("Audience name must not be empty.")
        if not any(
            f.strip() for f in (self.demographics, self.interests, self.behaviors)
        ):
            raise ValueError(
                "At least one of demographics, interests or behaviors is required."
            )
        return self


class Audience(AudienceFields):
    """A persisted audience profile."""

    id: str
    created_at: datetime
    updated_at: datetime
    owner: str = DEFAULT_OWNER

    def fields(self) -> AudienceFields:
        return AudienceFields(
            name=self.name,
            demographics=self.demographics,
            interests=self.interests,
            behaviors=self.behaviors,
        )

    def profile(self) -> str:
        """Render the persona text used inside research prompts."""
        return (
            f"Demographics: {self.demographics}. "
            f"Interests & Hobbies: {self.interests}. "
            f"Behaviors: {self.behaviors}."
        )


# ── Research results ───────────────────────────────────────────────────────


class Source(BaseModel):
    """A grounding citation returned alongside generated text."""

    title: str
    uri: str


class ResearchResult(BaseModel):
    """Formatted answer plus the web sources it was grounded on."""

    answer: str
    sources: list[Source] = []


def _number_to_str(value: object) -> object:
    """Chart values arrive as "85%" but sometimes as bare JSON numbers."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class ChartDataItem(BaseModel):
    label: str
    value: str

    coerce_numbers = field_validator("label", "value", mode="before")(_number_to_str)


class ComparisonChartDataItem(BaseModel):
    label: str
    audienceA_value: str
    audienceB_value: str

    coerce_numbers = field_validator(
        "label", "audienceA_value", "audienceB_value", mode="before"
    )(_number_to_str)


class DiscoveredAudience(BaseModel):
    """A consumer segment proposed by the discovery call."""

    audienceName: str
    description: str

    def to_audience_fields(self) -> AudienceFields:
        """Seed a savable profile: the description becomes the demographics."""
        return AudienceFields(
            name=self.audienceName,
            demographics=self.description,
            interests="",
            behaviors="",
        )


class ChartResult(BaseModel):
    data: list[ChartDataItem]
    sources: list[Source] = []


class ComparisonChartResult(BaseModel):
    data: list[ComparisonChartDataItem]
    sources: list[Source] = []


class DiscoveryResult(BaseModel):
    data: list[DiscoveredAudience]
    sources: list[Source] = []


class WidgetResult(BaseModel):
    """Outcome of a single dashboard widget: either a result or an error."""

    id: str
    title: str
    ok: bool
    result: Optional[ResearchResult] = None
    error: Optional[str] = None
