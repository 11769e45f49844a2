"""Тесты загрузки вопросов через ИИ (LLM замокан)."""
import json
from unittest.mock import AsyncMock, patch

import pytest

from quiz_bot.llm.prompts import build_fix_prompt
from quiz_bot.quiz.exceptions import LLMError
from quiz_bot.services.question_loader import dump_questions_json, fix_question_set, generate_question_set


class TestGenerateQuestionSet:

    @patch("quiz_bot.services.question_loader.chat_completion", new_callable=AsyncMock)
    async def test_valid_first_attempt(self, mock_chat, raw_question):
        mock_chat.return_value = "```json\n" + json.dumps([raw_question]) + "\n```"

        result = await generate_question_set("Firewalls filter traffic.")

        assert result.is_valid is True
        mock_chat.assert_awaited_once()
        prompt = mock_chat.call_args[0][0]
        assert "Firewalls filter traffic." in prompt

    @patch("quiz_bot.services.question_loader.chat_completion", new_callable=AsyncMock)
    async def test_retry_after_invalid(self, mock_chat, raw_question):
        """Первый ответ не JSON: одна повторная попытка со строгим промптом."""
        mock_chat.side_effect = ["Sorry, I can't", json.dumps([raw_question])]

        result = await generate_question_set("text")

        assert result.is_valid is True
        assert mock_chat.await_count == 2
        assert "Output ONLY a valid JSON array" in mock_chat.call_args[0][0]

    @patch("quiz_bot.services.question_loader.chat_completion", new_callable=AsyncMock)
    async def test_no_response(self, mock_chat):
        mock_chat.return_value = None

        with pytest.raises(LLMError):
            await generate_question_set("text")

    @patch("quiz_bot.services.question_loader.chat_completion", new_callable=AsyncMock)
    async def test_invalid_twice_returns_errors(self, mock_chat):
        mock_chat.return_value = "[]"

        result = await generate_question_set("text")

        assert result.is_valid is False
        assert "empty" in result.messages[0]


class TestFixQuestionSet:

    @patch("quiz_bot.services.question_loader.chat_completion", new_callable=AsyncMock)
    async def test_fix(self, mock_chat, raw_question):
        mock_chat.return_value = json.dumps([raw_question])

        result = await fix_question_set('[{"question": 1}]', ["Question at index 0 must have a non-empty string 'question'."])

        assert result.is_valid is True
        prompt = mock_chat.call_args[0][0]
        assert '[{"question": 1}]' in prompt
        assert "1. Question at index 0" in prompt

    @patch("quiz_bot.services.question_loader.chat_completion", new_callable=AsyncMock)
    async def test_fix_no_response(self, mock_chat):
        mock_chat.return_value = None

        with pytest.raises(LLMError):
            await fix_question_set("[]", [])


def test_build_fix_prompt_numbers_errors():
    prompt = build_fix_prompt("[]", ["first", "second"])

    assert "1. first\n2. second" in prompt
    assert "Can you fix the JSON for me?" in prompt


def test_dump_keeps_unicode():
    assert "привет" in dump_questions_json([{"question": "привет"}])
