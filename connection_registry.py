import threading
from datetime import datetime, timezone

from logger import setup_logger

logger = setup_logger(__name__)


class ConnectionRegistry:
    """in-memory socket id -> connection metadata, used for logging only"""

    def __init__(self):
        self._connections = {}
        self._total = 0
        self._lock = threading.Lock()

    def connect(self, connection_id, ip=None, user_agent=None):
        now = datetime.now(timezone.utc)
        info = {
            'id': connection_id,
            'ip': ip,
            'userAgent': user_agent,
            'connectedAt': now.isoformat(),
            'messageCount': 0,
            'lastActivity': now.isoformat(),
        }
        with self._lock:
            self._connections[connection_id] = info
            self._total += 1
            active, total = len(self._connections), self._total

        logger.info(f"Client connected: {connection_id} ({active} active, {total} total)")
        return info

    def record_message(self, connection_id):
        """bump the message counter; unknown ids are ignored"""
        with self._lock:
            info = self._connections.get(connection_id)
            if info is None:
                return None
            info['messageCount'] += 1
            info['lastActivity'] = datetime.now(timezone.utc).isoformat()
            return dict(info)

    def disconnect(self, connection_id, reason=None):
        with self._lock:
            info = self._connections.pop(connection_id, None)
            active = len(self._connections)

        if info is not None:
            connected_at = datetime.fromisoformat(info['connectedAt'])
            duration = (datetime.now(timezone.utc) - connected_at).total_seconds()
            logger.info(
                f"Client disconnected: {connection_id} (Reason: {reason}, "
                f"Duration: {round(duration)}s, Messages: {info['messageCount']})"
            )
        logger.info(f"Active connections: {active}")
        return info

    def get(self, connection_id):
        with self._lock:
            info = self._connections.get(connection_id)
            return dict(info) if info else None

    def stats(self):
        with self._lock:
            return {'active': len(self._connections), 'total': self._total}
