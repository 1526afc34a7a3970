"""
ASGI rendition of the greeting server.

Same contract as hello_server, served by hypercorn for HTTP/2 support:

    hypercorn hello_asgi:app --bind 0.0.0.0:8000
"""

from hello_server import GREETING


async def app(scope, receive, send):
    """ASGI application that answers every request with the greeting."""
    if scope["type"] != "http":
        return

    # Drain request body
    while True:
        message = await receive()
        if not message.get("more_body", False):
            break

    await send({
        "type": "http.response.start",
        "status": 200,
        "headers": [
            [b"content-type", b"text/plain; charset=utf-8"],
            [b"content-length", str(len(GREETING)).encode()],
        ],
    })

    await send({
        "type": "http.response.body",
        "body": GREETING,
    })
