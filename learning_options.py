"""Learning options chosen by the client for each chat turn.

Every option is a str enum with a total ``parse`` that maps unknown or
missing values to an explicit default.
"""

from enum import Enum


class _Option(str, Enum):
    """base for option enums; every subclass overrides ``default``"""

    @classmethod
    def default(cls):
        """hook: the member used when a value is missing or unknown"""
        raise NotImplementedError(f"{cls.__name__} must define default()")

    @classmethod
    def parse(cls, value):
        """return the matching member, or the default for unknown values"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        return cls.default()


class Personality(_Option):
    GRAMMAR_TUTOR = 'grammar_tutor'
    PRONUNCIATION_COACH = 'pronunciation_coach'
    CONVERSATION_PARTNER = 'conversation_partner'
    VOCABULARY_BUILDER = 'vocabulary_builder'
    FLUENCY_COACH = 'fluency_coach'
    # general assistant personalities kept for older clients
    HELPFUL = 'helpful'
    CREATIVE = 'creative'
    TECHNICAL = 'technical'
    CASUAL = 'casual'
    PROFESSIONAL = 'professional'

    @classmethod
    def default(cls):
        return cls.CONVERSATION_PARTNER


class DifficultyLevel(_Option):
    BEGINNER = 'beginner'
    INTERMEDIATE = 'intermediate'
    ADVANCED = 'advanced'
    NATIVE = 'native'

    @classmethod
    def default(cls):
        return cls.INTERMEDIATE


class FeedbackStyle(_Option):
    GENTLE = 'gentle'
    DETAILED = 'detailed'
    IMMEDIATE = 'immediate'
    SUMMARY = 'summary'

    @classmethod
    def default(cls):
        return cls.GENTLE


class LearningMode(_Option):
    GRAMMAR = 'grammar'
    VOCABULARY = 'vocabulary'
    PRONUNCIATION = 'pronunciation'
    FLUENCY = 'fluency'
    CONVERSATION = 'conversation'
    SCENARIO = 'scenario'

    @classmethod
    def default(cls):
        return cls.CONVERSATION


class VocabularyLevel(str, Enum):
    BEGINNER = 'beginner'
    INTERMEDIATE = 'intermediate'
    ADVANCED = 'advanced'
