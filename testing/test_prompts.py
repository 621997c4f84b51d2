"""Tests for tutor prompt composition."""

import json

from learning_options import DifficultyLevel, FeedbackStyle, Personality
from prompts import (
    DIFFICULTY_CONTEXT,
    FEEDBACK_CONTEXT,
    PERSONALITY_PROMPTS,
    build_prompt,
    build_user_message,
    list_personalities,
)
from speech_analyzer import HeuristicTextAnalyzer


def test_every_option_has_a_template():
    assert set(PERSONALITY_PROMPTS) == set(Personality)
    assert set(DIFFICULTY_CONTEXT) == set(DifficultyLevel)
    assert set(FEEDBACK_CONTEXT) == set(FeedbackStyle)


def test_build_prompt_combines_personality_level_and_style():
    prompt = build_prompt("grammar_tutor", "beginner", "detailed")

    assert prompt.startswith("You are an expert English grammar tutor.")
    assert f"Student Level: {DIFFICULTY_CONTEXT[DifficultyLevel.BEGINNER]}" in prompt
    assert f"Feedback Style: {FEEDBACK_CONTEXT[FeedbackStyle.DETAILED]}" in prompt
    assert prompt.rstrip().endswith("maintaining an engaging conversation.")


def test_unknown_options_fall_back_to_defaults():
    prompt = build_prompt("pirate", "expert", None)

    assert prompt == build_prompt("conversation_partner", "intermediate", "gentle")


def test_build_prompt_is_deterministic():
    assert build_prompt("fluency_coach", "native", "summary") == build_prompt(
        Personality.FLUENCY_COACH, DifficultyLevel.NATIVE, FeedbackStyle.SUMMARY
    )


def test_user_message_embeds_text_and_analysis():
    analysis = HeuristicTextAnalyzer().analyze("hello how are you")

    message = build_user_message("hello how are you", analysis)

    assert message.startswith('Student said: "hello how are you"')
    embedded = message.split("Speech Analysis: ", 1)[1].split("\n\n", 1)[0]
    assert json.loads(embedded)["wordCount"] == 4


def test_list_personalities_exposes_prompt_text():
    personalities = {p["id"]: p for p in list_personalities()}

    assert len(personalities) == len(Personality)
    assert personalities["conversation_partner"]["name"] == "Conversation_partner"
    assert personalities["casual"]["description"] == PERSONALITY_PROMPTS[Personality.CASUAL]
