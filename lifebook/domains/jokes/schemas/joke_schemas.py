"""Joke request schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Difficulty = Literal["easy", "medium", "hard"]


class JokeCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    category: Optional[str] = Field(default=None, max_length=64)
    difficulty: Optional[Difficulty] = None
    notes: Optional[str] = None


class JokeUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, max_length=64)
    difficulty: Optional[Difficulty] = None
    times_told: Optional[int] = Field(default=None, ge=0)
    success_rating: Optional[int] = Field(default=None, ge=1, le=10)
    notes: Optional[str] = None


class JokeTold(BaseModel):
    success_rating: Optional[int] = Field(default=None, ge=1, le=10)


class JokeListFilter(BaseModel):
    category: Optional[str] = None


class JokeGenerate(BaseModel):
    prompt: str = Field(min_length=1)
    category: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    person_id: Optional[int] = None


class IterationMessage(BaseModel):
    role: str
    content: str


class JokeIterate(BaseModel):
    conversation_history: List[IterationMessage] = Field(default_factory=list, max_length=30)
