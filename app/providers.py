"""
Upstream chat completion providers.

Both providers speak the OpenAI-compatible ``POST /chat/completions`` API and
go through the ``openai`` SDK. They differ only in how the bearer credential
is obtained: DeepSeek takes the static key, Zhipu needs a signed token minted
for every request.
"""
import logging
from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from .config import Settings
from .tokens import InvalidApiKeyError, generate_token

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Raised when the upstream model could not produce feedback."""


class ChatProvider:
    name = "base"

    def __init__(self, base_url: str, model: str, timeout: float = 60.0,
                 http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self.http_client = http_client
        self._openai: Optional[AsyncOpenAI] = None

    def bearer_token(self) -> str:
        raise NotImplementedError

    def _client(self) -> AsyncOpenAI:
        """
        Return the provider's single AsyncOpenAI client, built on first use.

        Requests with a different bearer (per-request signed tokens) get a
        ``with_options`` copy, which shares the same connection pool.
        """
        token = self.bearer_token()
        if self._openai is None:
            self._openai = AsyncOpenAI(
                api_key=token,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
                http_client=self.http_client,
            )
            return self._openai
        if token != self._openai.api_key:
            return self._openai.with_options(api_key=token)
        return self._openai

    async def aclose(self) -> None:
        if self._openai is not None:
            await self._openai.close()
            self._openai = None

    async def complete(self, system_prompt: str, user_text: str, temperature: float) -> str:
        """Send one system + user exchange and return the reply text verbatim."""
        client = self._client()
        try:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_text},
                ],
                temperature=temperature,
            )
        except openai.APIStatusError as e:
            logger.error(f"{self.name} API error {e.status_code}: {e.message}")
            raise ProviderError(f"{self.name} API returned an error") from e
        except openai.OpenAIError as e:
            logger.error(f"{self.name} request failed: {type(e).__name__} - {e}")
            raise ProviderError(f"{self.name} request failed") from e

        if not completion.choices or completion.choices[0].message.content is None:
            logger.error(f"{self.name} returned no completion content: {completion}")
            raise ProviderError(f"{self.name} returned an empty completion")

        return completion.choices[0].message.content


class DeepSeekProvider(ChatProvider):
    name = "deepseek"

    def __init__(self, api_key: Optional[str], **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key

    def bearer_token(self) -> str:
        if not self.api_key:
            logger.error("DEEPSEEK_API_KEY not set")
            raise ProviderError("Server configuration error: DEEPSEEK_API_KEY is not set.")
        return self.api_key


class ZhipuProvider(ChatProvider):
    name = "zhipu"

    def __init__(self, api_key: Optional[str], token_ttl_seconds: int = 3600, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.token_ttl_seconds = token_ttl_seconds

    def bearer_token(self) -> str:
        if not self.api_key:
            logger.error("ZHIPU_API_KEY not set")
            raise ProviderError("Server configuration error: ZHIPU_API_KEY is not set.")
        try:
            return generate_token(self.api_key, self.token_ttl_seconds)
        except InvalidApiKeyError as e:
            logger.error(f"Could not mint Zhipu token: {e}")
            raise ProviderError(str(e)) from e


def build_provider(settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> ChatProvider:
    """Pick the provider named by ``settings.llm_provider``."""
    name = (settings.llm_provider or "").strip().lower()
    if name == "deepseek":
        return DeepSeekProvider(
            api_key=settings.deepseek_api_key,
            base_url=settings.deepseek_base_url,
            model=settings.deepseek_model,
            timeout=settings.upstream_timeout_seconds,
            http_client=http_client,
        )
    if name == "zhipu":
        return ZhipuProvider(
            api_key=settings.zhipu_api_key,
            token_ttl_seconds=settings.zhipu_token_ttl_seconds,
            base_url=settings.zhipu_base_url,
            model=settings.zhipu_model,
            timeout=settings.upstream_timeout_seconds,
            http_client=http_client,
        )
    raise ProviderError(f"Unknown LLM provider: {settings.llm_provider!r}")
