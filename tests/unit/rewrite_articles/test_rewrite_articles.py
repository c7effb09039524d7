"""Tests for rewrite_articles.rewrite_articles module."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from common.config import RewriteConfig
from rewrite_articles.instructions import REWRITE_INSTRUCTIONS
from rewrite_articles.rewrite_articles import (
    MissingCredentialError,
    RewriteAuthError,
    RewriteError,
    rewrite_article,
)

ORIGINAL = '<p>De president sprak vandaag.</p><img src="https://cdn.example/p.jpg">'


def _client(reply=None, error=None) -> MagicMock:
    client = MagicMock()
    if error is not None:
        client.chat.completions.create = AsyncMock(side_effect=error)
    else:
        message = SimpleNamespace(content=reply)
        response = SimpleNamespace(choices=[SimpleNamespace(message=message)])
        client.chat.completions.create = AsyncMock(return_value=response)
    return client


def _auth_error() -> openai.AuthenticationError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(401, request=request)
    return openai.AuthenticationError("Incorrect API key provided", response=response, body=None)


class TestRewriteArticle:
    def test_sends_instructions_and_content(self) -> None:
        client = _client(reply="<p>The president spoke today.</p>")
        config = RewriteConfig(model="gpt-4o-mini", temperature=0.7)

        asyncio.run(rewrite_article(ORIGINAL, "sk-test", config, client=client))

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.7
        assert kwargs["messages"] == [
            {"role": "system", "content": REWRITE_INSTRUCTIONS},
            {"role": "user", "content": ORIGINAL},
        ]

    def test_reattaches_lost_images(self) -> None:
        client = _client(reply="<p>The president spoke today.</p>")
        result = asyncio.run(rewrite_article(ORIGINAL, "sk-test", RewriteConfig(), client=client))

        assert result.startswith("<p>The president spoke today.</p>")
        assert "https://cdn.example/p.jpg" in result

    def test_kept_images_not_duplicated(self) -> None:
        reply = '<p>Rewritten</p><img src="https://cdn.example/p.jpg">'
        result = asyncio.run(rewrite_article(ORIGINAL, "sk-test", RewriteConfig(), client=_client(reply=reply)))
        assert result.count("https://cdn.example/p.jpg") == 1

    def test_missing_key(self) -> None:
        client = _client(reply="unused")
        with pytest.raises(MissingCredentialError, match="not configured"):
            asyncio.run(rewrite_article(ORIGINAL, None, RewriteConfig(), client=client))
        client.chat.completions.create.assert_not_called()

    def test_empty_content(self) -> None:
        with pytest.raises(RewriteError):
            asyncio.run(rewrite_article("  ", "sk-test", RewriteConfig(), client=_client(reply="x")))

    def test_authentication_error(self) -> None:
        client = _client(error=_auth_error())
        with pytest.raises(RewriteAuthError) as exc_info:
            asyncio.run(rewrite_article(ORIGINAL, "sk-bad", RewriteConfig(), client=client))
        assert "401" in str(exc_info.value)
        assert "API key" in str(exc_info.value)

    def test_provider_error(self) -> None:
        client = _client(error=openai.OpenAIError("server exploded"))
        with pytest.raises(RewriteError, match="server exploded"):
            asyncio.run(rewrite_article(ORIGINAL, "sk-test", RewriteConfig(), client=client))

    def test_empty_reply(self) -> None:
        with pytest.raises(RewriteError, match="empty"):
            asyncio.run(rewrite_article(ORIGINAL, "sk-test", RewriteConfig(), client=_client(reply="")))

    @patch("rewrite_articles.rewrite_articles.AsyncOpenAI")
    def test_owned_client_is_closed(self, mock_client_cls) -> None:
        client = _client(reply="<p>Rewritten</p>")
        mock_client_cls.return_value.__aenter__.return_value = client
        config = RewriteConfig(request_timeout=12)

        result = asyncio.run(rewrite_article("<p>Origineel</p>", "sk-test", config))

        assert result == "<p>Rewritten</p>"
        mock_client_cls.assert_called_once_with(api_key="sk-test", timeout=12)
        mock_client_cls.return_value.__aexit__.assert_awaited_once()

    @patch("rewrite_articles.rewrite_articles.AsyncOpenAI")
    def test_owned_client_is_closed_on_error(self, mock_client_cls) -> None:
        mock_client_cls.return_value.__aenter__.return_value = _client(error=_auth_error())

        with pytest.raises(RewriteAuthError):
            asyncio.run(rewrite_article(ORIGINAL, "sk-bad", RewriteConfig()))

        mock_client_cls.return_value.__aexit__.assert_awaited_once()
