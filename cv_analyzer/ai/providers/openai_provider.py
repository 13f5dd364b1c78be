from __future__ import annotations

from typing import Optional

from openai import AsyncOpenAI


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        max_retries: int = 1,
    ):
        self._model = model
        # Timeouts are enforced by the caller around each attempt.
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or None,
            max_retries=max_retries,
        )

    async def complete(
        self,
        prompt: str,
        *,
        json_mode: bool,
        max_output_tokens: int,
        temperature: float,
    ) -> str:
        create_kwargs = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_output_tokens,
        }
        if json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(**create_kwargs)
        content = response.choices[0].message.content if response.choices else ""
        return content or ""
