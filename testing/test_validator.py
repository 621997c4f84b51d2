"""Tests for inbound message validation and learning option parsing."""

import pytest

from config_validator import ConfigValidator
from exceptions import ConfigurationError, ValidationError
from learning_options import DifficultyLevel, FeedbackStyle, LearningMode, Personality
from validator import ChatTurn, Validator


def test_bare_string_defaults_every_option():
    assert Validator.parse_chat_message("hello") == ChatTurn(text="hello")


def test_object_payload_is_normalized():
    turn = Validator.parse_chat_message({
        "text": "hi",
        "model": "",
        "personality": "Vocabulary_Builder",
        "learningMode": "scenario",
        "difficultyLevel": "native",
        "feedbackStyle": "unknown-style",
    })

    assert turn.model == "openai/gpt-3.5-turbo"
    assert turn.personality is Personality.VOCABULARY_BUILDER
    assert turn.learning_mode is LearningMode.SCENARIO
    assert turn.difficulty_level is DifficultyLevel.NATIVE
    assert turn.feedback_style is FeedbackStyle.GENTLE


@pytest.mark.parametrize("payload", [None, 3.5, ["hello"], {"text": None}, {"text": ""}])
def test_invalid_payloads_raise(payload):
    with pytest.raises(ValidationError):
        Validator.parse_chat_message(payload)


def test_length_limit_message():
    with pytest.raises(ValidationError, match="Maximum 1000 characters allowed"):
        Validator.validate_text("b" * 1001)

    assert Validator.validate_text("b" * 1000) == "b" * 1000


def test_option_parse_is_total():
    assert Personality.parse(None) is Personality.CONVERSATION_PARTNER
    assert DifficultyLevel.parse(12) is DifficultyLevel.INTERMEDIATE
    assert LearningMode.parse(" Fluency ") is LearningMode.FLUENCY
    assert FeedbackStyle.parse(FeedbackStyle.SUMMARY) is FeedbackStyle.SUMMARY


@pytest.mark.parametrize("option", [Personality, DifficultyLevel, FeedbackStyle, LearningMode])
def test_every_option_defines_its_default(option):
    assert isinstance(option.default(), option)
    assert option.parse("no-such-value") is option.default()


def test_config_validator_allows_missing_api_key():
    assert ConfigValidator.validate_api_key("") is False
    assert ConfigValidator.validate_api_key("sk-test") is True


def test_config_validator_rejects_bad_limits():
    with pytest.raises(ConfigurationError):
        ConfigValidator.validate_limits(max_message_length=0)
    with pytest.raises(ConfigurationError):
        ConfigValidator.validate_limits(max_retries=0)
    with pytest.raises(ConfigurationError):
        ConfigValidator.validate_port(70000)
    assert ConfigValidator.validate_limits(max_message_length=500, max_retries=2) is True
