"""Data models for Reddit listings and the synthesized persona."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Listing items
# ---------------------------------------------------------------------------

@dataclass
class RedditPost:
    """One submission from a user's ``submitted`` listing."""

    title: str
    content: str
    score: int
    comments: int
    created: str
    url: str
    subreddit: str
    placeholder: bool = False


@dataclass
class RedditComment:
    """One comment from a user's ``comments`` listing."""

    content: str
    score: int
    created: str
    url: str
    subreddit: str
    placeholder: bool = False


@dataclass
class ListingBundle:
    """Everything the listing source returned for one user."""

    username: str
    posts: List[RedditPost] = field(default_factory=list)
    comments: List[RedditComment] = field(default_factory=list)
    placeholder: bool = False

    @property
    def real_posts(self) -> List[RedditPost]:
        return [p for p in self.posts if not p.placeholder]

    @property
    def real_comments(self) -> List[RedditComment]:
        return [c for c in self.comments if not c.placeholder]

    @property
    def is_empty(self) -> bool:
        return not self.posts and not self.comments

    @property
    def subreddits(self) -> List[str]:
        """Distinct subreddit names in first-seen order, posts before comments."""
        seen: list[str] = []
        for item in [*self.real_posts, *self.real_comments]:
            if item.subreddit and item.subreddit not in seen:
                seen.append(item.subreddit)
        return seen


@dataclass
class Citation:
    """Links a persona section back to the listing item that evidenced it."""

    type: Literal["post", "comment"]
    content: str
    context: str
    url: str
    section: str


# ---------------------------------------------------------------------------
# Persona (validated from model output, so pydantic)
# ---------------------------------------------------------------------------

def _clamp_axis(value: object) -> int:
    try:
        number = int(round(float(value)))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 50
    return max(0, min(100, number))


class Demographics(BaseModel):
    age: str = "Unknown"
    occupation: str = "Unknown"
    status: str = "Unknown"
    location: str = "Unknown"
    tier: str = "Unknown"
    archetype: str = "Unknown"


class Personality(BaseModel):
    """Each axis runs 0–100."""

    introvert_extrovert: int = 50
    intuition_sensing: int = 50
    feeling_thinking: int = 50
    perceiving_judging: int = 50

    @field_validator("*", mode="before")
    @classmethod
    def _clamp(cls, value: object) -> int:
        return _clamp_axis(value)


class Motivations(BaseModel):
    """Each axis runs 0–100."""

    convenience: int = 50
    wellness: int = 50
    speed: int = 50
    preferences: int = 50
    comfort: int = 50
    social_connection: int = 50

    @field_validator("*", mode="before")
    @classmethod
    def _clamp(cls, value: object) -> int:
        return _clamp_axis(value)


class StructuredPersona(BaseModel):
    name: str
    demographics: Demographics = Field(default_factory=Demographics)
    quote: str = ""
    personality: Personality = Field(default_factory=Personality)
    motivations: Motivations = Field(default_factory=Motivations)
    traits: List[str] = Field(default_factory=list)
    behaviors: List[str] = Field(default_factory=list)
    frustrations: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
