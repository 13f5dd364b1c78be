import google.generativeai as genai


class GeminiProvider:
    def __init__(self, model: str, api_key: str):
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(model)

    async def complete(
        self,
        prompt: str,
        *,
        json_mode: bool,
        max_output_tokens: int,
        temperature: float,
    ) -> str:
        config_kwargs = {
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        }
        if json_mode:
            config_kwargs["response_mime_type"] = "application/json"
        response = await self._model.generate_content_async(
            prompt,
            generation_config=genai.GenerationConfig(**config_kwargs),
        )
        return response.text or ""
