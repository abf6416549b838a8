"""Chat completion client for the DeepSeek plan generator"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from app.config import PipelineConfig
from app.exceptions import ConfigurationError, UpstreamError
from services.prompts import SYSTEM_PROMPT

logger = logging.getLogger("nutrichat.llm")


class DeepSeekClient:
    """
    Thin synchronous client for an OpenAI-compatible chat completion endpoint.

    Each call sends ``[system prompt, *history, user prompt]`` and returns the text
    of the first choice. Failures are raised as UpstreamError (504 on timeout,
    a 5xx upstream status as-is, 502 otherwise); no retries.
    """

    def __init__(self, config: PipelineConfig, http_client: Optional[httpx.Client] = None):
        self.config = config
        self._http_client = http_client

    def _api_key(self) -> str:
        if not self.config.api_key:
            raise ConfigurationError("尚未設定 DEEPSEEK_API_KEY，無法呼叫 DeepSeek 服務。")
        return self.config.api_key

    def build_messages(self, prompt: str, history: Sequence[Dict[str, Any]] = ()) -> List[Dict[str, str]]:
        conversation = [
            {"role": item["role"], "content": item["content"]}
            for item in history or []
            if isinstance(item, dict)
            and isinstance(item.get("role"), str)
            and isinstance(item.get("content"), str)
            and item["role"]
            and item["content"]
        ]
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            *conversation,
            {"role": "user", "content": prompt},
        ]

    def complete(self, prompt: str, history: Sequence[Dict[str, Any]] = ()) -> str:
        """Send the prompt and return the raw completion text."""
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key()}",
        }
        body = {
            "model": self.config.model,
            "temperature": self.config.temperature,
            "messages": self.build_messages(prompt, history),
        }

        logger.info("Requesting completion model=%s messages=%d", self.config.model, len(body["messages"]))
        try:
            response = self._post(headers, body)
        except httpx.TimeoutException as e:
            logger.error("Generator request timed out after %sms", self.config.timeout_ms)
            raise UpstreamError("DeepSeek 回應逾時，請稍後再試。", http_status=504) from e
        except httpx.HTTPError as e:
            logger.error("Generator request failed: %s", e)
            raise UpstreamError(f"DeepSeek API 呼叫失敗：{e}", http_status=502) from e

        if not response.is_success:
            text = response.text
            logger.error("Generator returned HTTP %d", response.status_code)
            # only 5xx passes through; details keep the real upstream code
            status_code = response.status_code if response.status_code >= 500 else 502
            raise UpstreamError(
                f"DeepSeek API 回應錯誤（{response.status_code}）：{text}",
                http_status=status_code,
                upstream_status=response.status_code,
                upstream_body=text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"DeepSeek API 呼叫失敗：{e}", http_status=502) from e

        content = _first_choice_content(data)
        if not content:
            raise UpstreamError("DeepSeek 回傳內容為空，無法產生食譜。", http_status=502)
        return content

    def __call__(self, prompt: str, history: Sequence[Dict[str, Any]] = ()) -> str:
        return self.complete(prompt, history)

    def _post(self, headers: Dict[str, str], body: Dict[str, Any]) -> httpx.Response:
        if self._http_client is not None:
            return self._http_client.post(
                self.config.api_url, headers=headers, json=body, timeout=self.config.timeout_seconds
            )
        with httpx.Client(timeout=self.config.timeout_seconds) as client:
            return client.post(self.config.api_url, headers=headers, json=body)


def _first_choice_content(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else None
