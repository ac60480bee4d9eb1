import logging

import requests

from processing.prompts import FALLBACK_POEM, POEM_PROMPT

logger = logging.getLogger(__name__)

TEMPERATURE = 0.8
MAX_TOKENS = 200


class GenerationError(RuntimeError):
    pass


class PoemGenerator:
    """Turns a time label into a short poem via an OpenRouter chat completion.

    ``generate`` never raises: any failure is logged and replaced with a
    fixed fallback poem that still mentions the time.
    """

    def __init__(self, api_key: str, model: str, api_url: str,
                 app_url: str = None, timeout: float | None = None):
        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self.app_url = app_url or "http://localhost:3000"
        self.timeout = timeout

    def generate(self, time_label: str) -> str:
        logger.info("Generating poem for time: %s", time_label)
        try:
            poem = self._call_openrouter(POEM_PROMPT.format(time_label=time_label))
        except (requests.RequestException, GenerationError, ValueError) as e:
            logger.error("Error generating poem for %s: %s", time_label, e)
            return FALLBACK_POEM.format(time_label=time_label)

        logger.info("Generated poem for %s:\n%s", time_label, poem)
        return poem

    def _call_openrouter(self, prompt: str) -> str:
        response = requests.post(
            self.api_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
                "HTTP-Referer": self.app_url,
                "X-Title": "Poem Clock",
            },
            json={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": TEMPERATURE,
                "max_tokens": MAX_TOKENS,
            },
            timeout=self.timeout,
        )
        if not 200 <= response.status_code < 300:
            logger.error("OpenRouter API error: %s - %s", response.status_code, response.text)
            raise GenerationError(f"OpenRouter API returned {response.status_code}")

        data = response.json()
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str) or not content.strip():
            raise GenerationError("No poem content in response")
        return content.strip()
