import json
import time
from datetime import datetime, timezone

from completion_client import CompletionClient, CompletionRequest
from config import IS_PRODUCTION, LOG_PREVIEW_LENGTH, MAX_MESSAGE_LENGTH, MAX_RETRIES
from connection_registry import ConnectionRegistry
from exceptions import ValidationError
from feedback import extract_learning_feedback, record_progress
from logger import setup_logger
from prompts import build_prompt, build_user_message
from speech_analyzer import HeuristicTextAnalyzer
from validator import Validator

logger = setup_logger(__name__)

GENERIC_ERROR_REPLY = "I apologize, but I encountered an error. Please try again."
RATE_LIMIT_REPLY = "Too many requests. Please wait a moment before trying again."
NETWORK_ERROR_REPLY = "Network error. Please check your connection and try again."
INVALID_MESSAGE_REPLY = "Please provide a valid message."


def truncate(text, limit=LOG_PREVIEW_LENGTH):
    text = text or ''
    return text[:limit] + ('...' if len(text) > limit else '')


def error_reply(error):
    """map a failed turn to the text shown in the chat"""
    message = str(error)
    if isinstance(error, ValidationError):
        return message if message.startswith('Message too long') else INVALID_MESSAGE_REPLY
    lowered = message.lower()
    if 'rate limit' in lowered:
        return RATE_LIMIT_REPLY
    if 'network' in lowered or 'timeout' in lowered:
        return NETWORK_ERROR_REPLY
    return GENERIC_ERROR_REPLY


class SessionRelay:
    """orchestrates analysis, prompt composition and completion for one chat turn"""

    def __init__(self, analyzer=None, completion_client=None, registry=None,
                 max_message_length=MAX_MESSAGE_LENGTH, max_retries=MAX_RETRIES,
                 verbose_logging=not IS_PRODUCTION):
        self.analyzer = analyzer or HeuristicTextAnalyzer()
        self.completion_client = completion_client or CompletionClient()
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.max_message_length = max_message_length
        self.max_retries = max_retries
        self.verbose_logging = verbose_logging

    def handle_message(self, connection_id, data):
        """process one inbound chat message and return the tutor response payload"""
        start_time = time.monotonic()
        self.registry.record_message(connection_id)

        try:
            turn = Validator.parse_chat_message(data, self.max_message_length)
            logger.info(
                f'[{connection_id}] User said: "{truncate(turn.text)}" '
                f"(Mode: {turn.learning_mode.value}, Level: {turn.difficulty_level.value})"
            )

            analysis = self.analyzer.analyze(turn.text, turn.difficulty_level, turn.learning_mode)
            system_prompt = build_prompt(turn.personality, turn.difficulty_level, turn.feedback_style)
            request = CompletionRequest.for_turn(
                turn.model, system_prompt, build_user_message(turn.text, analysis)
            )

            result = self.completion_client.complete(request, self.max_retries)
            reply = result.to_dict()['choices'][0]['message']['content']
            processing_time = elapsed_ms(start_time)

            logger.info(f'[{connection_id}] Tutor reply ({processing_time}ms): "{truncate(reply)}"')

            response = {
                'reply': reply,
                'speechAnalysis': analysis.to_dict(),
                'learningFeedback': extract_learning_feedback(reply),
                'metadata': {
                    'processingTime': processing_time,
                    'model': turn.model,
                    'personality': turn.personality.value,
                    'learningMode': turn.learning_mode.value,
                    'difficultyLevel': turn.difficulty_level.value,
                    'timestamp': datetime.now(timezone.utc).isoformat(),
                    'fallback': result.is_fallback,
                    'fallbackReason': getattr(result, 'reason', None),
                },
            }

            record_progress(connection_id, analysis, turn.learning_mode)
            self.log_interaction(
                connection_id, turn.text, reply, analysis, turn.learning_mode.value,
                turn.difficulty_level.value, processing_time, True,
            )
            return response

        except Exception as e:
            processing_time = elapsed_ms(start_time)
            if isinstance(e, ValidationError):
                logger.warning(f"[{connection_id}] Rejected message ({processing_time}ms): {e}")
            else:
                logger.error(f"[{connection_id}] Error processing learning session ({processing_time}ms): {e}",
                             exc_info=True)

            reply = error_reply(e)
            failed_text, failed_mode = (data, '') if isinstance(data, str) else ('', '')
            if isinstance(data, dict):
                failed_text = data.get('text') if isinstance(data.get('text'), str) else ''
                failed_mode = str(data.get('learningMode') or '')
            self.log_interaction(
                connection_id, failed_text, reply, None, failed_mode, '',
                processing_time, False, str(e),
            )
            return {
                'reply': reply,
                'speechAnalysis': None,
                'learningFeedback': None,
                'error': True,
            }

    def log_interaction(self, connection_id, user_message, tutor_reply, analysis, learning_mode,
                        difficulty_level, processing_time, success, error_details=None):
        entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'socketId': connection_id,
            'userMessage': truncate(user_message),
            'tutorReply': truncate(tutor_reply),
            'learningMode': learning_mode,
            'difficultyLevel': difficulty_level,
            'speechAnalysis': {
                'wordCount': analysis.word_count,
                'grammarIssuesCount': len(analysis.grammar_issues),
                'fluencyScore': analysis.fluency_score,
                'vocabularyLevel': analysis.vocabulary_level.value if analysis.vocabulary_level else '',
            } if analysis else None,
            'processingTime': processing_time,
            'success': success,
            'errorDetails': error_details,
        }

        status = 'ok' if success else f'failed: {error_details}'
        logger.info(f"Learning interaction [{connection_id}] {processing_time}ms {status}")
        if self.verbose_logging:
            logger.info(f"Learning interaction detail: {json.dumps(entry, indent=2, ensure_ascii=False)}")
        return entry


def elapsed_ms(start_time):
    return int((time.monotonic() - start_time) * 1000)
