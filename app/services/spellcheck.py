import logging
from typing import List, NamedTuple, Optional

from openai import AsyncOpenAI

from app.config import Settings
from app.models.findings import SpellError
from app.services.broadcaster import Broadcaster
from app.services.prompt import build_prompt
from app.services.reply_parser import parse_reply
from app.services.scan_guard import ScanGuard, ScanLease

logger = logging.getLogger(__name__)


class SpellCheckResult(NamedTuple):
    errors: List[SpellError]
    prompt: str


class SpellChecker:
    """Sends page text to the completion API and parses the reply into spell errors."""

    def __init__(
        self,
        settings: Settings,
        guard: ScanGuard,
        broadcaster: Broadcaster,
        client: Optional[AsyncOpenAI] = None,
    ):
        self._settings = settings
        self._guard = guard
        self._broadcaster = broadcaster
        self._client = client

    def is_scanning(self) -> bool:
        return self._guard.is_scanning

    def _get_client(self) -> AsyncOpenAI:
        # Built on first use so a missing API key surfaces as a sentinel error
        # for the page instead of failing at startup.
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._settings.OPENROUTER_API_KEY,
                base_url=self._settings.OPENROUTER_BASE_URL,
                timeout=self._settings.COMPLETION_TIMEOUT,
            )
        return self._client

    async def check(self, text: str, model: str, lease: Optional[ScanLease] = None) -> SpellCheckResult:
        """Spell-check *text* with *model*.

        The call runs under *lease* when the caller already holds the scan
        gate; otherwise the gate is taken for the duration of the call and
        :class:`ScanInProgressError` is raised if it is busy.
        """
        if not text or not text.strip():
            logger.info("Skipping empty or whitespace-only text for spell check.")
            return SpellCheckResult([], "")

        own_lease = self._guard.acquire() if lease is None else None
        try:
            return await self._check(text, model)
        finally:
            if own_lease is not None:
                own_lease.release()

    async def _check(self, text: str, model: str) -> SpellCheckResult:
        self._broadcaster.progress(f"Checking text with AI using model: {model}...")
        prompt = build_prompt(text)
        logger.debug("Prompt sent to model %s: %s", model, prompt)

        try:
            completion = await self._get_client().chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0,
                max_tokens=self._settings.COMPLETION_MAX_TOKENS,
            )
            reply = completion.choices[0].message.content or ""
        except Exception as exc:
            logger.error("Error checking text with model %s: %s", model, exc)
            self._broadcaster.progress(f"Lỗi khi kiểm tra văn bản với AI: {exc}")
            return SpellCheckResult([SpellError.sentinel(str(exc))], prompt)

        logger.info("Raw reply from %s: %s", model, reply)
        errors = parse_reply(reply, text)
        self._broadcaster.progress(f"Đã tìm thấy {len(errors)} lỗi.")
        return SpellCheckResult(errors, prompt)
