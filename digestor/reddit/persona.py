"""Persona synthesis from a user's Reddit listings.

``synthesize_persona`` asks the language model for a JSON persona and, when
the model is unavailable or its answer cannot be parsed, falls back to a
canned persona built from the listing itself.  It never raises for model
problems.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError

from digestor.errors import SummarizerFailure
from digestor.llm.summarizer import PERSONA_INSTRUCTION, Summarizer
from digestor.reddit.models import (
    Citation,
    Demographics,
    ListingBundle,
    Motivations,
    Personality,
    StructuredPersona,
)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_MAX_PROMPT_SUBREDDITS = 10
_MAX_POST_CITATIONS = 5
_MAX_COMMENT_CITATIONS = 10

_PERSONA_SCHEMA = """{
  "name": "A realistic name that fits the user (not their username)",
  "demographics": {
    "age": "Estimated age range (e.g., '25-30')",
    "occupation": "Likely occupation based on interests/posts",
    "status": "Relationship status if determinable (Single/Married/Unknown)",
    "location": "Estimated location/region if mentioned",
    "tier": "User type (Early Adopter/Mainstream/Late Adopter)",
    "archetype": "User archetype (The Explorer/The Creator/The Socializer/The Achiever/etc.)"
  },
  "quote": "A representative quote that captures their essence (based on their actual comments if possible)",
  "personality": {
    "introvert_extrovert": 0-100 (0=very introverted, 100=very extroverted),
    "intuition_sensing": 0-100 (0=very sensing/practical, 100=very intuitive/abstract),
    "feeling_thinking": 0-100 (0=very thinking/logical, 100=very feeling/emotional),
    "perceiving_judging": 0-100 (0=very judging/structured, 100=very perceiving/flexible)
  },
  "motivations": {
    "convenience": 0-100,
    "wellness": 0-100,
    "speed": 0-100,
    "preferences": 0-100,
    "comfort": 0-100,
    "social_connection": 0-100
  },
  "traits": ["List of 4-6 personality traits as short phrases"],
  "behaviors": ["List of 4-6 observed behaviors/habits"],
  "frustrations": ["List of 4-6 frustrations/pain points they express"],
  "goals": ["List of 4-6 goals/needs they seem to have"]
}"""


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------

def build_persona_prompt(bundle: ListingBundle) -> str:
    """Render every listing item plus the top subreddits into one prompt."""
    blocks = [
        f"POST: {p.title}\n{p.content}\nSubreddit: r/{p.subreddit}\nScore: {p.score}"
        for p in bundle.posts
    ] + [
        f"COMMENT: {c.content}\nSubreddit: r/{c.subreddit}\nScore: {c.score}"
        for c in bundle.comments
    ]
    all_content = "\n\n---\n\n".join(blocks)
    top_subreddits = ", ".join(bundle.subreddits[:_MAX_PROMPT_SUBREDDITS])

    return (
        f'Based on the following Reddit posts and comments from user "{bundle.username}", '
        "create a structured user persona in JSON format.\n\n"
        f"REDDIT CONTENT:\n{all_content}\n\n"
        f"TOP SUBREDDITS: {top_subreddits}\n\n"
        "Please analyze this content and return a JSON object with the following structure:\n\n"
        f"{_PERSONA_SCHEMA}\n\n"
        "Base all assessments on evidence from their posts and comments. "
        "Be specific and realistic. Return only valid JSON."
    )


# ---------------------------------------------------------------------------
# Model output parsing
# ---------------------------------------------------------------------------

def extract_json_object(text: str) -> dict[str, Any] | None:
    """Return the outermost ``{...}`` block in *text* as a dict, if any."""
    match = _JSON_OBJECT_RE.search(text)
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def parse_persona(text: str) -> StructuredPersona:
    """Validate model output as a :class:`StructuredPersona`.

    Raises:
        SummarizerFailure: If no JSON object is found or it does not validate.
    """
    data = extract_json_object(text)
    if data is None:
        raise SummarizerFailure("model output contains no JSON object")
    try:
        return StructuredPersona.model_validate(data)
    except ValidationError as exc:
        raise SummarizerFailure(f"model output is not a persona: {exc}") from exc


# ---------------------------------------------------------------------------
# Fallbacks and citations
# ---------------------------------------------------------------------------

def fallback_persona(bundle: ListingBundle) -> StructuredPersona:
    """Canned persona used when the model is unavailable or fails."""
    top = ", ".join(bundle.subreddits[:3]) or "Reddit"
    posts = bundle.real_posts
    quote = f'"{posts[0].title}"' if posts else f'"Active in {top}"'

    return StructuredPersona(
        name=f"Reddit User {bundle.username}",
        demographics=Demographics(
            age="25-35",
            occupation="Unknown",
            status="Unknown",
            location="Unknown",
            tier="Active User",
            archetype="The Participant",
        ),
        quote=quote,
        personality=Personality(),
        motivations=Motivations(
            convenience=60,
            wellness=50,
            speed=55,
            preferences=65,
            comfort=60,
            social_connection=70,
        ),
        traits=["Active", "Engaged", "Curious", "Social"],
        behaviors=[f"Posts in {top}", "Regular commenter", "Community participant"],
        frustrations=["Limited data available", "Privacy settings may restrict analysis"],
        goals=["Community engagement", "Information sharing", "Social connection"],
    )


def build_citations(bundle: ListingBundle) -> list[Citation]:
    """First five posts and first ten comments; placeholders are never cited."""
    citations = [
        Citation(
            type="post",
            content=f"{post.title}\n{post.content}",
            context=f"Used to infer interests and occupation from r/{post.subreddit}",
            url=post.url,
            section="Demographics & Interests",
        )
        for post in bundle.real_posts[:_MAX_POST_CITATIONS]
    ]
    citations.extend(
        Citation(
            type="comment",
            content=comment.content,
            context=f"Used to analyze personality and communication style from r/{comment.subreddit}",
            url=comment.url,
            section="Personality & Behavior",
        )
        for comment in bundle.real_comments[:_MAX_COMMENT_CITATIONS]
    )
    return citations


def synthesize_persona(
    summarizer: Summarizer | None, bundle: ListingBundle
) -> tuple[StructuredPersona, bool]:
    """Return ``(persona, from_model)``.

    ``from_model`` is ``False`` whenever the canned fallback was used.
    """
    if summarizer is None or bundle.is_empty:
        return fallback_persona(bundle), False

    try:
        text = summarizer.summarize(PERSONA_INSTRUCTION, build_persona_prompt(bundle))
        return parse_persona(text), True
    except SummarizerFailure as exc:
        print(f"[persona] AI analysis failed: {exc}")
        return fallback_persona(bundle), False
