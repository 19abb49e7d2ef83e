"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from digestor.api import app

    uvicorn digestor.api:app --reload
"""

from digestor.api.app import app

__all__ = ["app"]
