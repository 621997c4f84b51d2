#!/usr/bin/env python3
"""
Startup script for the English Voice Tutor
Validates configuration, installs shutdown and crash hooks, then serves
HTTP and Socket.IO on one port
"""
import os
import signal
import sys
import threading

from config import APP_ENV, OPENAI_API_KEY, PORT, RATE_LIMIT_MAX, RATE_LIMIT_WINDOW
from config_validator import ConfigValidator
from exceptions import ConfigurationError
from logger import setup_logger

logger = setup_logger(__name__)

SHUTDOWN_TIMEOUT = 30  # seconds


def handle_uncaught_exception(exc_type, exc_value, exc_traceback):
    """process-fatal: log and exit with a failure code"""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))
    os._exit(1)


def handle_thread_exception(args):
    """background thread failures are logged but not fatal"""
    logger.error(
        f"Unhandled exception in thread {args.thread.name if args.thread else '?'}",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )


def graceful_shutdown(signum, frame):
    name = signal.Signals(signum).name
    print(f"\n🛑 Received {name}. Starting graceful shutdown...")
    logger.info(f"Received {name}, shutting down")

    # force exit if the server does not stop in time
    timer = threading.Timer(SHUTDOWN_TIMEOUT, lambda: os._exit(1))
    timer.daemon = True
    timer.start()
    sys.exit(0)


def install_hooks():
    sys.excepthook = handle_uncaught_exception
    threading.excepthook = handle_thread_exception
    signal.signal(signal.SIGTERM, graceful_shutdown)
    signal.signal(signal.SIGINT, graceful_shutdown)


def print_banner():
    print("=" * 60)
    print("🎓 ENGLISH VOICE TUTOR")
    print("=" * 60)
    print(f"📍 Server running at http://localhost:{PORT}")
    print(f"🌍 Environment: {APP_ENV}")
    print(f"🔑 API Key configured: {'✅' if OPENAI_API_KEY else '❌ (demo mode)'}")
    print(f"📊 Rate Limit: {RATE_LIMIT_MAX} requests per {RATE_LIMIT_WINDOW // 60} minutes")
    print("🎯 Ready for English learning sessions!")


def main():
    """Main startup function"""
    install_hooks()

    try:
        ConfigValidator.validate_all()
    except ConfigurationError as e:
        logger.error(f"Startup error: {e}")
        print(f"❌ Failed to start application: {e}")
        sys.exit(1)

    from web_api import create_app

    app, socketio = create_app()
    print_banner()

    try:
        socketio.run(app, host='0.0.0.0', port=PORT, allow_unsafe_werkzeug=True)
    finally:
        print("✅ Graceful shutdown completed")
        logger.info("Server stopped")


if __name__ == "__main__":
    main()
