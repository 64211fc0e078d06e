"""Advisory enrichment through a local OpenAI-compatible model endpoint."""

from __future__ import annotations

import ipaddress
import json
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from ..config import Limits
from ..errors import ConfigError
from ..git.sampler import sample_diff
from ..logging import get_logger
from .base import AdvisoryResult, build_prompt, normalize_advice_text

SYSTEM_PROMPT = "You are a senior code reviewer. Answer in at most two sentences."


@dataclass
class ModelRequest:
    """Chat completion request sent to the local runtime."""

    prompt: str
    system: Optional[str]
    model: str
    base_url: str
    timeout: float


class LocalModelAdvisor:
    """Posts the sampled diff to ``{base_url}/chat/completions`` on a local host."""

    DEFAULT_MODEL = "ai/smollm2:360M-Q4_K_M"
    DEFAULT_BASE_URL = "http://localhost:12434/engines/v1"

    def __init__(
        self,
        limits: Limits | None = None,
        *,
        model: str | None = None,
        base_url: str | None = None,
        transport: Callable[[ModelRequest], str] | None = None,
    ) -> None:
        self.limits = limits or Limits()
        self.model = model or self.DEFAULT_MODEL
        self.base_url = self._ensure_local_url(base_url or self.DEFAULT_BASE_URL)
        self._transport = transport or self._http_transport
        self.logger = get_logger("advisory.local")

    def advise(self, diff: str) -> AdvisoryResult:
        sampling = sample_diff(diff, self.limits.max_advisory_chars)
        request = ModelRequest(
            prompt=build_prompt(sampling),
            system=SYSTEM_PROMPT,
            model=self.model,
            base_url=self.base_url,
            timeout=self.limits.advisory_timeout,
        )
        try:
            raw = self._transport(request)
        except RuntimeError as exc:
            self.logger.debug("local advisory failed: %s", exc)
            return AdvisoryResult(text=None, sampling=sampling)
        text = normalize_advice_text(raw)
        return AdvisoryResult(text=text or None, sampling=sampling)

    @staticmethod
    def _http_transport(request: ModelRequest) -> str:
        endpoint = f"{request.base_url}/chat/completions"
        messages = []
        if request.system:
            messages.append({"role": "system", "content": request.system})
        messages.append({"role": "user", "content": request.prompt})
        payload = {"model": request.model, "messages": messages, "temperature": 0.2}

        http_request = Request(
            endpoint,
            data=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urlopen(http_request, timeout=request.timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            raise RuntimeError(f"Local model returned status {exc.code}: {exc.reason}") from exc
        except (URLError, TimeoutError) as exc:
            raise RuntimeError(f"Local model unreachable: {exc}") from exc

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise RuntimeError("Local model returned invalid JSON") from exc
        return _extract_content(response_payload)

    @classmethod
    def _ensure_local_url(cls, url: str) -> str:
        normalized = url.rstrip("/")
        host = urlparse(normalized).hostname
        if host is None or _is_local_host(host):
            return normalized
        raise ConfigError(
            f"Remote base_url '{url}' is not permitted. Configure a local model runner."
        )


def _extract_content(payload: object) -> str:
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    if not isinstance(first, dict):
        return ""
    message = first.get("message")
    if isinstance(message, dict) and isinstance(message.get("content"), str):
        return message["content"]
    text = first.get("text")
    return text if isinstance(text, str) else ""


def _is_local_host(host: str) -> bool:
    lowered = host.lower()
    if lowered in {"localhost", "127.0.0.1", "0.0.0.0", "::1", "model-runner.docker.internal"}:
        return True
    if lowered.endswith(".local") or lowered.endswith(".localdomain"):
        return True
    try:
        return ipaddress.ip_address(lowered).is_loopback
    except ValueError:
        return False


__all__ = ["LocalModelAdvisor", "ModelRequest"]
