import os
from dotenv import load_dotenv

load_dotenv()

# a missing key is allowed: the tutor then runs in demo mode with scripted replies
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY') or None
OPENAI_API_URL = os.getenv('OPENAI_API_URL', 'https://openrouter.ai/api/v1')

APP_ENV = os.getenv('APP_ENV', 'development').lower()
IS_PRODUCTION = APP_ENV == 'production'
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

PORT = int(os.getenv('PORT', 3000))
VERSION = '1.0.0'
APP_TITLE = 'English Voice Tutor'

# completion Configuration
MAX_RETRIES = int(os.getenv('MAX_RETRIES', 3))
REQUEST_TIMEOUT = 30  # seconds
MAX_BACKOFF_MS = 10000
MAX_TOKENS = 600
TEMPERATURE = 0.7

# message Configuration
MAX_MESSAGE_LENGTH = int(os.getenv('MAX_MESSAGE_LENGTH', 1000))
LOG_PREVIEW_LENGTH = 100

# rate limit Configuration
RATE_LIMIT_WINDOW = int(os.getenv('RATE_LIMIT_WINDOW', 15 * 60))  # seconds
RATE_LIMIT_MAX = int(os.getenv('RATE_LIMIT_MAX', 100))

# socket origins: development allows the local frontend, production only same-origin (None)
CORS_ORIGINS = None if IS_PRODUCTION else ['http://localhost:3000']

DEFAULT_MODEL = 'openai/gpt-3.5-turbo'

AVAILABLE_MODELS = [
    {'id': 'openai/gpt-3.5-turbo', 'name': 'GPT-3.5 Turbo', 'provider': 'OpenAI'},
    {'id': 'openai/gpt-4', 'name': 'GPT-4', 'provider': 'OpenAI'},
    {'id': 'anthropic/claude-3-haiku', 'name': 'Claude 3 Haiku', 'provider': 'Anthropic'},
    {'id': 'anthropic/claude-3-sonnet', 'name': 'Claude 3 Sonnet', 'provider': 'Anthropic'},
    {'id': 'google/gemini-pro', 'name': 'Gemini Pro', 'provider': 'Google'},
]

CLIENT_FEATURES = ['voice-chat', 'multiple-models', 'conversation-history', 'themes']

STATIC_DIR = 'static'
LOGS_DIR = 'logs'
