from dataclasses import dataclass

from config import DEFAULT_MODEL, MAX_MESSAGE_LENGTH
from exceptions import ValidationError
from learning_options import Personality, LearningMode, DifficultyLevel, FeedbackStyle
from logger import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class ChatTurn:
    """normalized inbound chat message"""
    text: str
    model: str = DEFAULT_MODEL
    personality: Personality = Personality.CONVERSATION_PARTNER
    learning_mode: LearningMode = LearningMode.CONVERSATION
    difficulty_level: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    feedback_style: FeedbackStyle = FeedbackStyle.GENTLE


class Validator:
    """inbound chat message validation"""

    @staticmethod
    def validate_text(text, max_length=MAX_MESSAGE_LENGTH):
        """validate the utterance text"""
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Message text is required")

        if len(text) > max_length:
            raise ValidationError(f"Message too long. Maximum {max_length} characters allowed.")

        logger.debug(f"Message text validated ({len(text)} characters)")
        return text

    @staticmethod
    def parse_chat_message(data, max_length=MAX_MESSAGE_LENGTH):
        """normalize a bare string or an object payload into a ChatTurn"""
        if isinstance(data, str):
            # older clients send only the text
            return ChatTurn(text=Validator.validate_text(data, max_length))

        if not isinstance(data, dict):
            raise ValidationError("Invalid message format")

        text = Validator.validate_text(data.get('text'), max_length)
        model = data.get('model')
        return ChatTurn(
            text=text,
            model=model if isinstance(model, str) and model.strip() else DEFAULT_MODEL,
            personality=Personality.parse(data.get('personality')),
            learning_mode=LearningMode.parse(data.get('learningMode')),
            difficulty_level=DifficultyLevel.parse(data.get('difficultyLevel')),
            feedback_style=FeedbackStyle.parse(data.get('feedbackStyle')),
        )
