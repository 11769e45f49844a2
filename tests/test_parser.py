"""Тесты извлечения JSON из текста."""
import json

import pytest

from quiz_bot.quiz.exceptions import QuestionParseError
from quiz_bot.quiz.parser import load_question_set, parse_questions_json


class TestParseQuestionsJson:

    def test_plain_json(self, raw_question):
        text = json.dumps([raw_question])

        assert parse_questions_json(text) == [raw_question]

    def test_markdown_code_block(self, raw_question):
        """JSON внутри ```json ... ```: как отвечают чат-боты."""
        text = "Here you go:\n```json\n" + json.dumps([raw_question], indent=2) + "\n```\nEnjoy!"

        assert parse_questions_json(text) == [raw_question]

    def test_array_inside_prose(self, raw_question):
        text = "Sure! " + json.dumps([raw_question]) + " Let me know if you need more."

        assert parse_questions_json(text) == [raw_question]

    def test_non_array_json_returned_as_is(self):
        """Объект вместо массива разбирается; отклонит его уже валидатор."""
        assert parse_questions_json('{"question": "x"}') == {"question": "x"}

    @pytest.mark.parametrize("text", ["", "   ", "not json at all", "[{broken"])
    def test_invalid(self, text):
        with pytest.raises(QuestionParseError):
            parse_questions_json(text)


class TestLoadQuestionSet:

    def test_valid_text(self, raw_question):
        result = load_question_set(json.dumps([raw_question]))

        assert result.is_valid is True
        assert result.data[0].id == "q1"

    def test_invalid_json_single_error(self):
        """Невалидный JSON: один QuestionParseError, без исправленной копии."""
        result = load_question_set("{oops")

        assert result.is_valid is False
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], QuestionParseError)
        assert "Invalid JSON format" in result.messages[0]
        assert result.normalized is None

    def test_validation_errors_passed_through(self):
        result = load_question_set("[]")

        assert result.is_valid is False
        assert "empty" in result.messages[0]
