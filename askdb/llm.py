# askdb/llm.py

from typing import Protocol

import httpx

from .config import Settings, settings
from .errors import ModelCallError
from .logger import get_logger

logger = get_logger(__name__)


class CompletionClient(Protocol):
    def complete(self, prompt: str, stop: str, temperature: float = 0.0) -> str:
        ...


class OllamaClient:
    """
    Blocking completion client for the Ollama runtime (POST /api/generate).
    """

    def __init__(self, config: Settings = settings, http: httpx.Client | None = None):
        self.config = config
        self.http = http or httpx.Client(base_url=config.ollama_url, timeout=config.llm_timeout)

    def complete(self, prompt: str, stop: str, temperature: float = 0.0) -> str:
        options: dict = {"temperature": temperature}
        if self.config.llm_forward_stop and stop:
            options["stop"] = [stop]

        payload = {
            "model": self.config.ollama_model,
            "prompt": prompt,
            "stream": False,
            "options": options,
        }
        logger.debug("Requesting completion from %s (temperature=%s)", self.config.ollama_model, temperature)

        try:
            resp = self.http.post("/api/generate", json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            raise ModelCallError(f"Model call failed with HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ModelCallError(f"Model call failed: {e}") from e
        except ValueError as e:
            raise ModelCallError("Model returned a non-JSON response") from e

        output = body.get("response") if isinstance(body, dict) else None
        if not isinstance(output, str):
            raise ModelCallError("Model response has no 'response' text")
        return output

    def close(self):
        self.http.close()
