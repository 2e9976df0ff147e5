# ecolens/ai_router.py — the one place that talks to the generative model
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence

from openai import OpenAI, OpenAIError

from .config import Settings
from .errors import ExternalServiceError
from .prompts import Prompt

logger = logging.getLogger(__name__)

# candidates tried by probe_models() when none are given
PROBE_MODELS = ("gpt-4o-mini", "gpt-4o", "gpt-4.1-mini", "gpt-4.1-nano")


class AIService:
    """Text + vision completions over a single OpenAI client.

    The client is created once with a bounded timeout and no automatic
    retries; callers see failures as ExternalServiceError.
    """

    def __init__(self, settings: Settings, client: Optional[OpenAI] = None):
        self.model = settings.model
        self.vision_model = settings.vision_model
        self.client = client or OpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.ai_timeout,
            max_retries=0,
        )

    def _complete(self, model: str, content: Any, max_tokens: Optional[int] = None) -> str:
        kwargs: Dict[str, Any] = {}
        if max_tokens:
            kwargs["max_tokens"] = max_tokens
        try:
            rsp = self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": content}],
                **kwargs,
            )
        except OpenAIError as e:
            logger.warning("[ai] %s call failed: %s", model, e)
            raise ExternalServiceError(str(e)) from e
        return (rsp.choices[0].message.content or "").strip()

    def generate(self, prompt: Prompt) -> str:
        if prompt.image is None:
            return self._complete(self.model, prompt.text)
        content = [
            {"type": "text", "text": prompt.text},
            {"type": "image_url", "image_url": {"url": prompt.image.data_url()}},
        ]
        return self._complete(self.vision_model, content)

    def list_models(self) -> List[Dict[str, str]]:
        try:
            models = list(self.client.models.list())
        except OpenAIError as e:
            raise ExternalServiceError(str(e)) from e
        # OpenAI has no display names; the id doubles as one
        return [{"name": m.id, "displayName": m.id} for m in models]

    def probe_models(self, candidates: Sequence[str] = PROBE_MODELS) -> List[Dict[str, Any]]:
        """Send a tiny prompt to each model and report which ones answer."""
        results: List[Dict[str, Any]] = []
        for name in candidates:
            try:
                self._complete(name, "Test", max_tokens=5)
                results.append({"name": name, "ok": True})
            except ExternalServiceError as e:
                results.append({"name": name, "ok": False, "error": str(e)})
        return results
