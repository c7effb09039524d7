import logging
from typing import Optional

import openai
from openai import AsyncOpenAI

from common.config import RewriteConfig
from common.html import reattach_images
from rewrite_articles.instructions import REWRITE_INSTRUCTIONS

logger = logging.getLogger(__name__)


class RewriteError(Exception):
    """The rewrite provider failed or returned nothing usable."""


class RewriteAuthError(RewriteError):
    """The rewrite provider rejected the configured API key."""


class MissingCredentialError(RewriteError):
    """No rewrite provider key is configured."""


async def rewrite_article(
    content: str,
    api_key: Optional[str],
    config: RewriteConfig,
    client: Optional[AsyncOpenAI] = None,
) -> str:
    """Rewrite article content with an LLM, keeping its images attached."""
    if not api_key:
        raise MissingCredentialError(
            "OpenAI API key is not configured. Add it in the settings to enable rewriting."
        )
    if not content or not content.strip():
        raise RewriteError("Nothing to rewrite: article content is empty")

    if client is None:
        async with AsyncOpenAI(api_key=api_key, timeout=config.request_timeout) as owned:
            response = await _complete(owned, content, config)
    else:
        response = await _complete(client, content, config)

    rewritten = (response.choices[0].message.content or "").strip() if response.choices else ""
    if not rewritten:
        raise RewriteError("Failed to rewrite article: the model returned an empty message")

    return reattach_images(content, rewritten)


async def _complete(client: AsyncOpenAI, content: str, config: RewriteConfig):
    try:
        return await client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": REWRITE_INSTRUCTIONS},
                {"role": "user", "content": content},
            ],
            temperature=config.temperature,
        )
    except openai.AuthenticationError as e:
        raise RewriteAuthError(
            "OpenAI rejected the API key (401). Check your OpenAI API key in the settings."
        ) from e
    except openai.OpenAIError as e:
        raise RewriteError(f"Failed to rewrite article: {e}") from e
