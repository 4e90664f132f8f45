from typing import List, Literal, Optional

from pydantic import Field

from app.models.base import CamelModel

CheckType = Literal["spellCheck", "brokenLinks", "seoIndex"]


class ScanRequest(CamelModel):
    url: str = Field(min_length=1, description="Site base URL; https:// is assumed when no scheme is given.")
    model: Optional[str] = Field(default=None, description="Completion model name; defaults to DEFAULT_MODEL.")
    check_types: List[CheckType] = Field(
        default=["spellCheck"],
        min_length=1,
        description="Checks to run on every content item.",
    )
