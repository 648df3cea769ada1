from typing import Optional

import openai
import structlog

from ..models import ArticleDraft, FailureKind, StepResult

logger = structlog.get_logger(__name__)


class Summarizer:
    """Summarizes article bodies with an OpenAI chat completion"""

    def __init__(
        self,
        client: Optional[openai.AsyncOpenAI],
        model: str = "gpt-4",
        max_tokens: int = 1024,
        temperature: float = 0.5,
        system_prompt: str = "You are a news summarization expert.",
        prompt: str = "Summarize the following news article in 3-4 concise sentences."
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.system_prompt = system_prompt
        self.prompt = prompt

    def build_user_prompt(self, draft: ArticleDraft) -> str:
        return f"{self.prompt}\n\n{draft.content}"

    async def summarize(self, draft: ArticleDraft) -> StepResult[str]:
        if self.client is None:
            logger.warning("summarizer_unavailable", title=draft.title)
            return StepResult.fail(FailureKind.UPSTREAM, "OpenAI client not configured")

        logger.info("summarization_started", title=draft.title, model=self.model)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": self.build_user_prompt(draft)}
                ]
            )
        except openai.APITimeoutError as e:
            logger.error("summarization_failed", title=draft.title, error=f"OpenAI request timed out: {e}")
            return StepResult.fail(FailureKind.NETWORK, "OpenAI request timed out")
        except openai.APIConnectionError as e:
            logger.error("summarization_failed", title=draft.title, error=str(e))
            return StepResult.fail(FailureKind.NETWORK, f"OpenAI connection failed: {e}")
        except openai.OpenAIError as e:
            logger.error("summarization_failed", title=draft.title, error=str(e))
            return StepResult.fail(FailureKind.UPSTREAM, f"OpenAI request failed: {e}")

        summary = _first_choice_text(response)
        if not summary:
            logger.warning("summarization_empty", title=draft.title)
            return StepResult.fail(FailureKind.EMPTY, "Model returned an empty summary")

        logger.info("summarization_completed", title=draft.title, length=len(summary))
        return StepResult.ok(summary)


def _first_choice_text(response) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content.strip() if isinstance(content, str) else ""
