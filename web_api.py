import os
import time
from datetime import datetime, timezone

import psutil
from flask import Blueprint, Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_socketio import SocketIO, emit
from werkzeug.exceptions import HTTPException

from config import (
    AVAILABLE_MODELS,
    CLIENT_FEATURES,
    CORS_ORIGINS,
    IS_PRODUCTION,
    RATE_LIMIT_MAX,
    RATE_LIMIT_WINDOW,
    STATIC_DIR,
    VERSION,
)
from connection_registry import ConnectionRegistry
from logger import setup_logger
from prompts import list_personalities
from session_relay import SessionRelay

logger = setup_logger(__name__)

SECURITY_HEADERS = {
    'Content-Security-Policy': (
        "default-src 'self'; "
        "style-src 'self' 'unsafe-inline' https://cdnjs.cloudflare.com; "
        "script-src 'self' 'unsafe-inline'; "
        "font-src 'self' https://cdnjs.cloudflare.com; "
        "img-src 'self' data: https:; "
        "connect-src 'self' ws: wss:"
    ),
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'Referrer-Policy': 'no-referrer',
}


def memory_usage():
    """current memory of this process, in bytes"""
    info = psutil.Process().memory_info()
    return {'rss': info.rss, 'vms': info.vms}


def create_api_blueprint():
    api = Blueprint('api', __name__, url_prefix='/api')

    @api.route('/models', methods=['GET'])
    def get_models():
        return jsonify(AVAILABLE_MODELS)

    @api.route('/personalities', methods=['GET'])
    def get_personalities():
        return jsonify(list_personalities())

    return api


def register_socket_handlers(socketio, relay, registry):

    @socketio.on('connect')
    def handle_connect(auth=None):
        registry.connect(
            request.sid,
            ip=request.remote_addr,
            user_agent=request.headers.get('User-Agent'),
        )
        emit('connection-confirmed', {
            'id': request.sid,
            'serverTime': datetime.now(timezone.utc).isoformat(),
            'features': CLIENT_FEATURES,
        })

    @socketio.on('chat message')
    def handle_chat_message(data):
        emit('tutor response', relay.handle_message(request.sid, data))

    @socketio.on('ping')
    def handle_ping(*args):
        emit('pong', {'timestamp': int(time.time() * 1000)})

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        registry.disconnect(request.sid, reason)


def create_app(relay=None, registry=None):
    """build the Flask app and its Socket.IO server"""
    app = Flask(__name__, static_folder=STATIC_DIR, static_url_path='')
    CORS(app)

    registry = registry if registry is not None else ConnectionRegistry()
    relay = relay or SessionRelay(registry=registry)
    app.config['START_TIME'] = time.time()
    app.config['CONNECTION_REGISTRY'] = registry
    app.config['SESSION_RELAY'] = relay

    limiter = Limiter(
        get_remote_address,
        app=app,
        storage_uri='memory://',
        strategy='fixed-window',
    )
    api = create_api_blueprint()
    limiter.limit(f"{RATE_LIMIT_MAX} per {RATE_LIMIT_WINDOW} seconds")(api)
    app.register_blueprint(api)

    @app.before_request
    def log_request():
        logger.info(f"{request.method} {request.path} - {request.remote_addr}")

    @app.after_request
    def add_security_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    @app.errorhandler(429)
    def handle_rate_limit(error):
        return jsonify({
            'error': 'Too many requests from this IP, please try again later.',
            'retryAfter': RATE_LIMIT_WINDOW,
        }), 429

    @app.errorhandler(Exception)
    def handle_error(error):
        if isinstance(error, HTTPException):
            return jsonify({
                'success': False,
                'error': error.description,
                'type': type(error).__name__
            }), error.code
        logger.error(f"API Error: {error}", exc_info=True)
        return jsonify({
            'success': False,
            'error': str(error),
            'type': type(error).__name__
        }), 500

    @app.route('/health', methods=['GET'])
    def health_check():
        return jsonify({
            'status': 'healthy',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'uptime': round(time.time() - app.config['START_TIME'], 3),
            'memory': memory_usage(),
            'version': VERSION,
            'connections': registry.stats(),
        })

    @app.route('/')
    def serve_frontend():
        if app.static_folder and os.path.exists(os.path.join(app.static_folder, 'index.html')):
            return send_from_directory(app.static_folder, 'index.html')
        return "API is running. Connect a Socket.IO client to start practicing."

    socketio = SocketIO(app, cors_allowed_origins=CORS_ORIGINS)
    register_socket_handlers(socketio, relay, registry)

    logger.info(f"App created ({'production' if IS_PRODUCTION else 'development'} mode)")
    return app, socketio


if __name__ == '__main__':
    from start_app import main
    main()
