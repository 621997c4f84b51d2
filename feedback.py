import re
from datetime import datetime, timezone

from logger import setup_logger

logger = setup_logger(__name__)

# tagged sections run until the next "[" or the end of the reply
SECTION_PATTERNS = {
    'grammar': re.compile(r'\[FEEDBACK\](.*?)(?=\[|\Z)', re.DOTALL),
    'pronunciation': re.compile(r'\[PRONUNCIATION\](.*?)(?=\[|\Z)', re.DOTALL),
    'vocabulary': re.compile(r'\[VOCABULARY\](.*?)(?=\[|\Z)', re.DOTALL),
}

GRAMMAR_PENALTY_PER_ISSUE = 20


def extract_learning_feedback(reply):
    """collect tagged tutor sections into grammar/pronunciation/vocabulary lists"""
    feedback = {
        'grammar': [],
        'pronunciation': [],
        'vocabulary': [],
        'general': [],
    }

    for category, pattern in SECTION_PATTERNS.items():
        for match in pattern.finditer(reply or ''):
            feedback[category].append(match.group(1).strip())

    return feedback


def grammar_score(issue_count):
    if issue_count == 0:
        return 100
    return max(0, 100 - issue_count * GRAMMAR_PENALTY_PER_ISSUE)


def build_progress_update(connection_id, analysis, learning_mode):
    """per-turn progress snapshot, logged only"""
    return {
        'socketId': connection_id,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'learningMode': getattr(learning_mode, 'value', learning_mode),
        'grammarScore': grammar_score(len(analysis.grammar_issues)),
        'fluencyScore': analysis.fluency_score,
        'vocabularyLevel': analysis.vocabulary_level.value if analysis.vocabulary_level else '',
        'wordCount': analysis.word_count,
    }


def record_progress(connection_id, analysis, learning_mode):
    progress = build_progress_update(connection_id, analysis, learning_mode)
    logger.info(
        f"Progress update [{connection_id}]: grammar={progress['grammarScore']} "
        f"fluency={progress['fluencyScore']} vocabulary={progress['vocabularyLevel']} "
        f"words={progress['wordCount']}"
    )
    return progress
