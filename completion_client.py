"""Chat-completion client with bounded retries and a scripted fallback.

The client never raises past ``complete``: a missing credential or an
exhausted retry budget both produce a ``Fallback`` result whose reply is one
of three canned tutor messages.
"""

import re
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import openai
from openai import OpenAI

from config import (
    APP_TITLE,
    DEFAULT_MODEL,
    MAX_BACKOFF_MS,
    MAX_RETRIES,
    MAX_TOKENS,
    OPENAI_API_KEY,
    OPENAI_API_URL,
    PORT,
    REQUEST_TIMEOUT,
    TEMPERATURE,
)
from exceptions import APIError, RateLimitedError
from logger import setup_logger

logger = setup_logger(__name__)

FALLBACK_MISSING_CREDENTIAL = 'missing_credential'
FALLBACK_RETRIES_EXHAUSTED = 'retries_exhausted'

GREETING_RE = re.compile(r'hello|hi|hey|good (morning|afternoon|evening)', re.IGNORECASE)

GREETING_REPLY = (
    "Hello! I'm your English tutor. I'm here to help you practice speaking English. "
    "Unfortunately, I'm currently running in demo mode without full AI capabilities, "
    "but I can still help you practice! Please continue speaking and I'll provide basic feedback."
)
QUESTION_REPLY = (
    "That's a great question! I can see you're practicing your English well. "
    "In full mode, I would provide detailed feedback on your grammar, pronunciation, and vocabulary. "
    "For now, keep practicing - your speech is being analyzed and you're doing great!"
)
ACKNOWLEDGEMENT_REPLY = (
    "Thank you for sharing that with me! I can see you're making good progress with your English speaking. "
    "Your message was clear and well-structured. Keep practicing and you'll continue to improve!"
)


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str

    def to_dict(self):
        return {'role': self.role, 'content': self.content}


@dataclass(frozen=True)
class CompletionRequest:
    messages: Tuple[ChatMessage, ...]
    model: str = DEFAULT_MODEL
    max_tokens: int = MAX_TOKENS
    temperature: float = TEMPERATURE
    stream: bool = False

    @classmethod
    def for_turn(cls, model, system_prompt, user_content):
        return cls(
            model=model or DEFAULT_MODEL,
            messages=(
                ChatMessage('system', system_prompt),
                ChatMessage('user', user_content),
            ),
        )

    @property
    def user_content(self):
        for message in reversed(self.messages):
            if message.role == 'user':
                return message.content
        return ''

    def to_payload(self):
        return {
            'model': self.model,
            'messages': [m.to_dict() for m in self.messages],
            'max_tokens': self.max_tokens,
            'temperature': self.temperature,
            'stream': self.stream,
        }


@dataclass(frozen=True)
class CompletionResult:
    reply: str

    is_fallback = False

    def to_dict(self):
        """same shape as an upstream chat completion"""
        return {'choices': [{'message': {'content': self.reply}}]}


@dataclass(frozen=True)
class Upstream(CompletionResult):
    attempts: int = 1


@dataclass(frozen=True)
class Fallback(CompletionResult):
    reason: str = FALLBACK_RETRIES_EXHAUSTED

    is_fallback = True


@dataclass
class RetryState:
    max_attempts: int
    attempt: int = 1
    last_error: Optional[Exception] = None

    @property
    def is_last_attempt(self):
        return self.attempt >= self.max_attempts


def create_fallback_reply(user_content):
    """pick a canned reply for a greeting, a question, or anything else"""
    if GREETING_RE.search(user_content or ''):
        return GREETING_REPLY
    if '?' in (user_content or ''):
        return QUESTION_REPLY
    return ACKNOWLEDGEMENT_REPLY


def backoff_delay(attempt):
    """exponential backoff in seconds, capped at MAX_BACKOFF_MS"""
    return min(1000 * 2 ** (attempt - 1), MAX_BACKOFF_MS) / 1000


def parse_retry_after(value, attempt):
    """whole seconds from a retry-after header, or 2**attempt when unusable"""
    try:
        seconds = int(float(value))
    except (TypeError, ValueError, OverflowError):
        seconds = 0
    return seconds if seconds > 0 else 2 ** attempt


class CompletionClient:
    """calls the chat-completion endpoint, degrading to scripted replies"""

    def __init__(self, api_key=OPENAI_API_KEY, base_url=OPENAI_API_URL,
                 timeout=REQUEST_TIMEOUT, client=None, sleep=time.sleep):
        self.api_key = api_key
        self.sleep = sleep
        self.client = client
        if self.client is None and api_key:
            self.client = OpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
                default_headers={
                    'HTTP-Referer': f'http://localhost:{PORT}',
                    'X-Title': APP_TITLE,
                },
            )

    @property
    def has_credential(self):
        return bool(self.api_key)

    def complete(self, request, max_retries=MAX_RETRIES):
        if not self.has_credential:
            logger.warning("No API key found, using fallback response")
            return self._fallback(request, FALLBACK_MISSING_CREDENTIAL)

        state = RetryState(max_attempts=max(1, max_retries))
        while state.attempt <= state.max_attempts:
            try:
                logger.info(f"API attempt {state.attempt}/{state.max_attempts}")
                reply = self._attempt(request)
                return Upstream(reply=reply, attempts=state.attempt)

            except RateLimitedError as e:
                state.last_error = e
                wait = parse_retry_after(e.retry_after, state.attempt)
                if not state.is_last_attempt:
                    logger.warning(f"Rate limited, waiting {wait}s before retry...")
                    self.sleep(wait)

            except Exception as e:
                # status errors, timeouts, network failures and malformed responses alike
                state.last_error = e
                logger.error(f"API attempt {state.attempt} failed: {e}")
                if not state.is_last_attempt:
                    delay = backoff_delay(state.attempt)
                    logger.info(f"Retrying in {int(delay * 1000)}ms...")
                    self.sleep(delay)

            state.attempt += 1

        logger.warning(f"All API attempts failed, using fallback response (last error: {state.last_error})")
        return self._fallback(request, FALLBACK_RETRIES_EXHAUSTED)

    def _attempt(self, request):
        """one HTTP call, translating SDK status errors into APIError"""
        try:
            response = self.client.chat.completions.create(
                model=request.model,
                messages=[m.to_dict() for m in request.messages],
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                stream=False,
            )
        except openai.RateLimitError as e:
            raise RateLimitedError(
                f"API error: 429 - {e.message}",
                retry_after=e.response.headers.get('retry-after'),
            ) from e
        except openai.APIStatusError as e:
            raise APIError(f"API error: {e.status_code} - {e.message}", status_code=e.status_code) from e

        if not response or not response.choices or not response.choices[0].message.content:
            raise APIError("Invalid API response format")
        return response.choices[0].message.content

    def _fallback(self, request, reason):
        return Fallback(reply=create_fallback_reply(request.user_content), reason=reason)
