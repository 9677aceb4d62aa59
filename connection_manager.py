"""
Connection management for WebSocket tool sessions.
Tracks active sessions, logs how they end, and closes them on shutdown.
"""

import logging
from typing import Callable
import websockets

logger = logging.getLogger(__name__)


class SessionContext:
    """Context for a WebSocket session with managed lifecycle."""

    def __init__(self, client_websocket: websockets.ServerProtocol, client_addr: str):
        self.client_websocket = client_websocket
        self.client_addr = client_addr
        self.session_id = f"{client_addr}_{id(client_websocket)}"


class ConnectionManager:
    """Manages WebSocket connections and session lifecycle."""

    def __init__(self):
        self.active_sessions: dict[str, SessionContext] = {}

    async def handle_session(self, client_websocket: websockets.ServerProtocol,
                             client_addr: str, session_handler: Callable) -> None:
        """
        Handle a complete WebSocket session lifecycle.

        Args:
            client_websocket: The client WebSocket connection
            client_addr: Client address string
            session_handler: Async function to handle the session business logic
        """
        context = SessionContext(client_websocket, client_addr)

        try:
            self.active_sessions[context.session_id] = context
            logger.info("New WebSocket connection from %s", client_addr)
            await session_handler(context)

        except websockets.exceptions.ConnectionClosedOK:
            logger.info("Client %s disconnected normally", client_addr)
        except websockets.exceptions.ConnectionClosed as e:
            if e.code == 1011:
                logger.warning("Client %s connection closed due to keepalive timeout", client_addr)
            else:
                logger.info("Client %s WebSocket connection closed: %s", client_addr, e)
        except Exception:
            logger.exception("Error in session for %s", client_addr)
        finally:
            self.active_sessions.pop(context.session_id, None)
            logger.info("Session ended for %s", client_addr)

    async def shutdown_all_sessions(self):
        """Gracefully shutdown all active sessions."""
        for context in list(self.active_sessions.values()):
            try:
                await context.client_websocket.close(code=1001, reason="Server shutting down")
            except Exception:
                logger.debug("Close failed for %s", context.client_addr, exc_info=True)
