"""Reddit listing ingestion and persona synthesis."""

from digestor.reddit.listing import extract_username, parse_comments, parse_posts
from digestor.reddit.models import ListingBundle, StructuredPersona
from digestor.reddit.persona import build_citations, synthesize_persona

__all__ = [
    "extract_username",
    "parse_posts",
    "parse_comments",
    "ListingBundle",
    "StructuredPersona",
    "build_citations",
    "synthesize_persona",
]
