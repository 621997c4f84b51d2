"""Rule-based speech analysis for transcribed utterances.

The checks are pattern-matching heuristics over the transcript, not parsed
grammar. False positives are expected. ``TextAnalyzer`` is the seam where a
real NLP component can replace ``HeuristicTextAnalyzer`` without touching the
session relay.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from exceptions import AnalysisError
from learning_options import DifficultyLevel, LearningMode, VocabularyLevel
from logger import setup_logger

logger = setup_logger(__name__)

SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')
LOWERCASE_I_RE = re.compile(r'\si\b')
SUBJECT_ARE_RE = re.compile(r'\b(i|he|she) are\b')
NON_WORD_RE = re.compile(r'[^\w]')

NEGATIVE_MARKERS = ['not', 'no', 'never', 'nothing', 'nobody', 'nowhere']

BASIC_WORDS = {
    'the', 'a', 'an', 'and', 'or', 'but', 'is', 'are', 'was', 'were', 'have', 'has', 'had',
    'do', 'does', 'did', 'will', 'would', 'can', 'could', 'should', 'may', 'might', 'must',
}
INTERMEDIATE_WORDS = {
    'although', 'however', 'therefore', 'furthermore', 'nevertheless', 'consequently',
    'specifically', 'particularly', 'especially',
}
ADVANCED_WORDS = {
    'notwithstanding', 'subsequently', 'predominantly', 'substantially',
    'comprehensively', 'systematically',
}

ADVANCED_RATIO_THRESHOLD = 0.10
INTERMEDIATE_RATIO_THRESHOLD = 0.05

DIFFICULT_WORDS = {
    'through': 'pronounced as "throo", not "throw"',
    'thought': 'pronounced as "thawt", with the "th" sound',
    'three': 'practice the "th" sound at the beginning',
    'world': 'pronounced as "wurld", not "word"',
    'work': 'pronounced as "wurk", with a clear "r" sound',
    'comfortable': 'pronounced as "KUHM-fər-tə-bəl", four syllables',
}

CONNECTIVE_WORDS = ['although', 'because', 'since', 'while', 'whereas', 'however', 'therefore']

BASE_FLUENCY_SCORE = 50


@dataclass
class GrammarIssue:
    type: str
    issue: str
    suggestion: str
    severity: str

    def to_dict(self):
        return {
            'type': self.type,
            'issue': self.issue,
            'suggestion': self.suggestion,
            'severity': self.severity,
        }


@dataclass
class PronunciationConcern:
    word: str
    tip: str
    type: str = 'pronunciation'

    def to_dict(self):
        return {'word': self.word, 'tip': self.tip, 'type': self.type}


@dataclass
class SpeechAnalysis:
    original_text: str
    word_count: int = 0
    sentence_count: int = 0
    grammar_issues: List[GrammarIssue] = field(default_factory=list)
    vocabulary_level: Optional[VocabularyLevel] = None
    pronunciation_concerns: List[PronunciationConcern] = field(default_factory=list)
    fluency_score: int = 0
    suggestions: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self):
        """wire shape sent to the browser"""
        data = {
            'originalText': self.original_text,
            'wordCount': self.word_count,
            'sentenceCount': self.sentence_count,
            'grammarIssues': [issue.to_dict() for issue in self.grammar_issues],
            'vocabularyLevel': self.vocabulary_level.value if self.vocabulary_level else '',
            'pronunciationConcerns': [concern.to_dict() for concern in self.pronunciation_concerns],
            'fluencyScore': self.fluency_score,
            'suggestions': list(self.suggestions),
        }
        if self.error:
            data['error'] = self.error
        return data


def tokenize(text):
    return text.lower().split()


def split_sentences(text):
    return [s for s in SENTENCE_SPLIT_RE.split(text) if s.strip()]


def check_grammar(text):
    """flag capitalization, subject-verb and double negative issues per sentence"""
    issues = []

    for sentence in split_sentences(text):
        stripped = sentence.strip()
        lowered = stripped.lower()

        # a standalone lowercase "i" after the first word
        if LOWERCASE_I_RE.search(stripped):
            issues.append(GrammarIssue(
                type='capitalization',
                issue='The pronoun "I" should always be capitalized',
                suggestion='Remember to capitalize "I" when referring to yourself',
                severity='minor',
            ))

        if SUBJECT_ARE_RE.search(lowered):
            issues.append(GrammarIssue(
                type='subject_verb_agreement',
                issue='Subject-verb disagreement detected',
                suggestion='Use "am" with "I", "is" with "he/she/it", "are" with "you/we/they"',
                severity='major',
            ))

        # raw substring counts, so "nothing" also counts as "no" and "not"
        negative_count = sum(lowered.count(marker) for marker in NEGATIVE_MARKERS)
        if negative_count > 1:
            issues.append(GrammarIssue(
                type='double_negative',
                issue='Avoid using double negatives in English',
                suggestion='Use only one negative word per clause',
                severity='major',
            ))

    return issues


def assess_vocabulary_level(text):
    words = tokenize(text)
    total = len(words)
    if total == 0:
        return VocabularyLevel.BEGINNER

    advanced_ratio = sum(1 for w in words if w in ADVANCED_WORDS) / total
    intermediate_ratio = sum(1 for w in words if w in INTERMEDIATE_WORDS) / total

    if advanced_ratio > ADVANCED_RATIO_THRESHOLD:
        return VocabularyLevel.ADVANCED
    if intermediate_ratio > INTERMEDIATE_RATIO_THRESHOLD:
        return VocabularyLevel.INTERMEDIATE
    return VocabularyLevel.BEGINNER


def identify_pronunciation_concerns(text):
    concerns = []
    for word in tokenize(text):
        clean_word = NON_WORD_RE.sub('', word)
        tip = DIFFICULT_WORDS.get(clean_word)
        if tip:
            concerns.append(PronunciationConcern(word=clean_word, tip=tip))
    return concerns


def calculate_fluency_score(text, word_count):
    """score length, connective usage and word variety, clamped to 0-100"""
    score = BASE_FLUENCY_SCORE

    if word_count > 20:
        score += 20
    elif word_count > 10:
        score += 10
    elif word_count < 5:
        score -= 20

    lowered = text.lower()
    if any(marker in lowered for marker in CONNECTIVE_WORDS):
        score += 15

    words = tokenize(text)
    if words:
        variety_ratio = len(set(words)) / len(words)
        if variety_ratio > 0.8:
            score += 10
        elif variety_ratio < 0.6:
            score -= 10

    return min(100, max(0, score))


def generate_suggestions(analysis, learning_mode, difficulty_level):
    suggestions = []

    if learning_mode == LearningMode.GRAMMAR and analysis.grammar_issues:
        suggestions.append('Focus on the grammar corrections provided above')

    if (learning_mode == LearningMode.VOCABULARY
            and analysis.vocabulary_level == VocabularyLevel.BEGINNER
            and difficulty_level == DifficultyLevel.INTERMEDIATE):
        suggestions.append('Try using more complex vocabulary and linking words')

    if learning_mode == LearningMode.FLUENCY and analysis.fluency_score < 70:
        suggestions.append('Try speaking in longer sentences and using connecting words')

    if analysis.word_count < 10:
        suggestions.append('Try to elaborate more on your thoughts - give examples or details')

    return suggestions


class TextAnalyzer(ABC):
    """strategy interface used by the session relay"""

    @abstractmethod
    def analyze(self, text, difficulty_level, learning_mode):
        """return a SpeechAnalysis for one utterance"""


class HeuristicTextAnalyzer(TextAnalyzer):
    """word-list and regex based analyzer"""

    def analyze(self, text, difficulty_level=DifficultyLevel.INTERMEDIATE,
                learning_mode=LearningMode.CONVERSATION):
        if not isinstance(text, str):
            raise AnalysisError(f"Cannot analyze {type(text).__name__}, expected text")

        difficulty_level = DifficultyLevel.parse(difficulty_level)
        learning_mode = LearningMode.parse(learning_mode)

        analysis = SpeechAnalysis(original_text=text)
        try:
            analysis.word_count = len(text.split())
            analysis.sentence_count = len(split_sentences(text))
            analysis.grammar_issues = check_grammar(text)
            analysis.vocabulary_level = assess_vocabulary_level(text)
            analysis.pronunciation_concerns = identify_pronunciation_concerns(text)
            analysis.fluency_score = calculate_fluency_score(text, analysis.word_count)
            analysis.suggestions = generate_suggestions(analysis, learning_mode, difficulty_level)
        except Exception as e:
            logger.error(f"Error in speech analysis: {e}", exc_info=True)
            analysis.error = 'Analysis temporarily unavailable'

        return analysis
