"""Import / export schemas"""

from datetime import datetime
from typing import Any, List

from pydantic import AliasChoices, BaseModel, Field

from .entry import EntryResponse


class ExportDocument(BaseModel):
    """Versioned export of all of a user's entries"""

    version: str
    exportDate: datetime
    entries: List[EntryResponse]


class ImportRequest(BaseModel):
    """Import payload; older exports carry the list under 'movies'"""

    entries: Any = Field(None, validation_alias=AliasChoices("entries", "movies"))


class ImportResult(BaseModel):
    message: str = "Import successful"
    imported: int
    total: int
