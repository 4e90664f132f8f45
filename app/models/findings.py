from typing import Literal, Optional

from pydantic import StrictInt, StrictStr

from app.models.base import CamelModel

SENTINEL_WORD = "N/A"


class SpellError(CamelModel):
    """A spelling finding reported by the model, or a sentinel carrying a failure.

    Sentinels use ``error_word == "N/A"`` and put the diagnostic text in
    ``message``.  ``offset`` is a character index into the checked text and is
    taken from the model as-is.
    """

    error_word: StrictStr
    original_sentence: StrictStr
    corrected_sentence: StrictStr
    offset: StrictInt
    message: StrictStr
    url: Optional[str] = None
    model: Optional[str] = None

    @classmethod
    def sentinel(cls, message: str, sentence: str = SENTINEL_WORD) -> "SpellError":
        return cls(
            error_word=SENTINEL_WORD,
            original_sentence=sentence,
            corrected_sentence=sentence,
            offset=0,
            message=message,
        )

    @property
    def is_sentinel(self) -> bool:
        return self.error_word == SENTINEL_WORD


SeoIssueType = Literal["missing_title", "missing_description", "noindex_found"]


class SeoIssue(CamelModel):
    type: SeoIssueType
    message: str
    url: str
