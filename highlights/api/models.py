"""Pydantic schemas for the persisted wire shapes exchanged with the host."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TokenIn(BaseModel):
    """Transcript word as produced by transcription; times may be missing."""
    model_config = ConfigDict(extra="ignore")

    word: str = ""
    start: float | None = None
    end: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _text_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and "word" not in data and "text" in data:
            data = {**data, "word": data["text"]}
        return data


class IntervalIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    start: float = 0.0
    end: float = 0.0
    color: str = ""

    @model_validator(mode="after")
    def _ordered(self) -> IntervalIn:
        if self.start > self.end:
            raise ValueError(f"highlight {self.id or '?'}: start {self.start} > end {self.end}")
        return self


class SuggestionIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    start: int = 0
    end: int = 0
    text: str = ""
    color: str = ""

    @field_validator("start", "end")
    @classmethod
    def _clamp_index(cls, v: int) -> int:
        return max(v, 0)


class ProjectDocument(BaseModel):
    """Tokens, highlights and suggestions for one transcript."""
    model_config = ConfigDict(extra="ignore")

    words: list[TokenIn] = Field(default_factory=list)
    highlights: list[IntervalIn] = Field(default_factory=list)
    suggestions: list[SuggestionIn] = Field(default_factory=list)
