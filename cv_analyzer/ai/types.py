from typing import Callable, Protocol


class AIClient(Protocol):
    async def complete(
        self,
        prompt: str,
        *,
        json_mode: bool,
        max_output_tokens: int,
        temperature: float,
    ) -> str: ...


# Resolves the configured client on first use, after request validation.
ClientProvider = Callable[[], AIClient]
