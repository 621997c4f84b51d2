"""Tests for learning feedback extraction and progress snapshots."""

from feedback import build_progress_update, extract_learning_feedback, grammar_score
from learning_options import LearningMode
from speech_analyzer import HeuristicTextAnalyzer


def test_extracts_multiple_sections_per_category():
    reply = (
        "[FEEDBACK] Use 'am' with 'I'.\n"
        "[EXPLANATION] Subject and verb must agree.\n"
        "[FEEDBACK] Capitalize 'I'.\n"
        "[VOCABULARY] thrilled - very excited"
    )

    feedback = extract_learning_feedback(reply)

    assert feedback["grammar"] == ["Use 'am' with 'I'.", "Capitalize 'I'."]
    assert feedback["vocabulary"] == ["thrilled - very excited"]
    assert feedback["pronunciation"] == []
    assert feedback["general"] == []


def test_multiline_section_runs_until_next_tag():
    feedback = extract_learning_feedback("[PRONUNCIATION] th-\nrough\n[TIP] relax")

    assert feedback["pronunciation"] == ["th-\nrough"]


def test_untagged_reply_yields_empty_lists():
    assert extract_learning_feedback("Great job today!") == {
        "grammar": [], "pronunciation": [], "vocabulary": [], "general": []
    }
    assert extract_learning_feedback(None)["grammar"] == []


def test_grammar_score_penalizes_each_issue():
    assert grammar_score(0) == 100
    assert grammar_score(2) == 60
    assert grammar_score(7) == 0


def test_progress_update_summarizes_analysis():
    analysis = HeuristicTextAnalyzer().analyze("i are happy today and i are excited")

    progress = build_progress_update("sid-1", analysis, LearningMode.GRAMMAR)

    assert progress["socketId"] == "sid-1"
    assert progress["learningMode"] == "grammar"
    assert progress["grammarScore"] == 60
    assert progress["wordCount"] == 8
    assert progress["vocabularyLevel"] == "beginner"
