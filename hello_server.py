#!/usr/bin/env python3
"""Greeting server for the htmx + Alpine.js tutorial.

Every request, whatever its method or path, gets the same plain-text greeting.
"""
from http.server import HTTPServer, BaseHTTPRequestHandler
from socketserver import ThreadingMixIn
import logging
import sys

HOST = "0.0.0.0"
PORT = 8000
GREETING = b"Hello, htmx + Alpine.js tutorial!\n"

# Larger unread bodies close the connection instead of being drained
MAX_DRAIN = 256 * 1024
READ_SIZE = 65536
MAX_LINE = 65537

logger = logging.getLogger(__name__)


class Handler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def do_GET(self):
        try:
            length = self._content_length()
        except ValueError:
            self.send_error(400, "Bad Content-Length")
            return

        self.send_response(200)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(GREETING)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(GREETING)

        if not self._discard_body(length):
            self.close_connection = True

    def __getattr__(self, name):
        # One route, every method.
        if name.startswith("do_"):
            return self.do_GET
        raise AttributeError(name)

    def _content_length(self):
        """Declared body length, or None for a chunked body.

        Raises ValueError if Content-Length is not a non-negative integer.
        """
        if "chunked" in self.headers.get("Transfer-Encoding", "").lower():
            return None
        value = self.headers.get("Content-Length")
        if value is None:
            return 0
        value = value.strip()
        if not value.isdigit():
            raise ValueError(value)
        return int(value)

    def _discard_body(self, length):
        """
        Consume up to MAX_DRAIN bytes of request body after the response.

        Returns:
            True if the connection can carry another request, False if the
            body was too large, malformed or cut short.
        """
        try:
            if length is None:
                return self._discard_chunked()
            if length > MAX_DRAIN:
                return False
            while length > 0:
                data = self.rfile.read(min(length, READ_SIZE))
                if not data:
                    return False
                length -= len(data)
            return True
        except (OSError, ValueError):
            return False

    def _discard_chunked(self):
        budget = MAX_DRAIN
        while True:
            line = self.rfile.readline(MAX_LINE)
            if not line.endswith(b"\n"):
                return False
            size = int(line.split(b";")[0].strip(), 16)
            if size < 0 or size > budget:
                return False
            if size == 0:
                break
            budget -= size
            if len(self.rfile.read(size + 2)) != size + 2:  # chunk data plus CRLF
                return False

        # Trailer section ends with an empty line
        while True:
            line = self.rfile.readline(MAX_LINE)
            if not line.endswith(b"\n"):
                return False
            if not line.strip():
                return True
            budget -= len(line)
            if budget < 0:
                return False

    def log_message(self, format, *args):
        pass  # No per-request logging


class ThreadedHTTPServer(ThreadingMixIn, HTTPServer):
    daemon_threads = True
    allow_reuse_address = True
    request_queue_size = 128


def make_server(address=(HOST, PORT)):
    """Bind the listener. Raises OSError if the address cannot be bound."""
    return ThreadedHTTPServer(address, Handler)


def main(address=(HOST, PORT)):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )
    try:
        server = make_server(address)
    except OSError as e:
        logger.error("listen tcp %s:%d: %s", address[0], address[1], e)
        sys.exit(1)

    logger.info("Listening on http://localhost:%d", server.server_address[1])
    try:
        server.serve_forever()
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
