"""PDF form tool server entry point.

Run with:
    python app.py                       # WebSocket tool-call server
    python app.py --transport stdio     # MCP over stdio
    python app.py --transport streamable-http
"""
import argparse
import asyncio
import logging
import signal

from logging_utils import setup_logging
from config import DEFAULT_TRANSPORT, TRANSPORTS, WEBSOCKET_HOST, WEBSOCKET_PORT

logger = logging.getLogger("app")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="PDF form tools for agent clients")
    parser.add_argument("--transport", choices=TRANSPORTS, default=DEFAULT_TRANSPORT)
    parser.add_argument("--host", default=WEBSOCKET_HOST, help="WebSocket bind host")
    parser.add_argument("--port", type=int, default=WEBSOCKET_PORT, help="WebSocket bind port")
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(argv)


def run_websocket(host: str, port: int):
    from websocket_handler import run_websocket_server

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    server_task = loop.create_task(run_websocket_server(host, port))

    def shutdown_handler(*_):  # noqa: ANN002
        logger.info("Shutdown signal received. Stopping services...")
        server_task.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_handler)
        except NotImplementedError:  # Windows may not support SIGTERM
            pass

    try:
        loop.run_until_complete(server_task)
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        loop.close()
        logger.info("WebSocket tool server stopped.")


def main(argv=None):
    args = parse_args(argv)
    if args.log_level:
        setup_logging(args.log_level)
    else:
        setup_logging()

    if args.transport == "websocket":
        run_websocket(args.host, args.port)
    else:
        from mcp_server import run_mcp_server
        run_mcp_server(args.transport)


if __name__ == "__main__":
    main()
