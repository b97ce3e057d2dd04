"""Client that pipelines framed requests to the server and prints the replies."""

import argparse
import socket
import sys

from rkvs.proto import HEADER_SIZE, ProtocolError, decode_length, encode_frame, read_exact, write_all

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8282
DEFAULT_MESSAGES = (b"H", b"h1", b"hello2", b"foo", b"x" * 52)


def send_request(sock, msg):
    """Send one framed request."""
    write_all(sock, encode_frame(msg))


def receive_response(sock):
    """Receive one framed response and return its payload."""
    length = decode_length(read_exact(sock, HEADER_SIZE))
    return read_exact(sock, length)


def run(host, port, messages):
    """Send all ``messages`` first, then collect one response per message."""
    messages = list(messages)
    with socket.create_connection((host, port)) as sock:
        for msg in messages:
            send_request(sock, msg)
        return [receive_response(sock) for _ in messages]


def main(argv=None):
    parser = argparse.ArgumentParser(description="Send test requests to the server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    try:
        responses = run(args.host, args.port, DEFAULT_MESSAGES)
    except ProtocolError as exc:
        print(f"protocol error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"connection error: {exc}", file=sys.stderr)
        return 1

    print("Connected")
    for response in responses:
        print(f"Server sent: '{response.decode('utf-8', errors='replace')}'")
    return 0