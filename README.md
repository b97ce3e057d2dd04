# rkvs

A small TCP server and client speaking a simple framed request/response
protocol. Each message is a 4-byte little-endian length followed by that many
bytes of payload, up to 4096 bytes. The server runs a single-threaded,
non-blocking event loop. It accepts pipelined requests and echoes each one
back in the same framing.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
rkvs-server 8282
```

The port is a required positional argument. The server listens on
`127.0.0.1` at that port and logs each request it receives as
`Client sent: {<length>, <payload>}`, along with each connection it opens or
closes. It closes a connection when:

- a frame announces more than 4096 bytes,
- the connection's input or output buffer (64 KiB) would overflow,
- the peer closes its end or a read or write fails.

A request is only answered once its whole payload has arrived; a header with
no payload after it yet is kept until more data comes in.

The server accepts at most 64 connections at a time. Accepting one more is
treated as fatal: `rkvs-server` prints `fatal: exceeded max connections` and
exits with status 1. Ctrl-C stops it with status 0. If it cannot bind or
listen, it prints the error and exits with status 1.

## Running the client

```
rkvs-client
rkvs-client --host 127.0.0.1 --port 8282
```

By default the client connects to `127.0.0.1:8282`. It sends a fixed set of
test messages (`H`, `h1`, `hello2`, `foo` and a run of 52 `x` characters)
back to back without waiting in between. It then reads one response per
message, prints `Connected`, and prints each response as
`Server sent: '<payload>'`. On a connection or protocol error it prints the
error to standard error and exits with status 1.

## Using the library

```python
import socket

from rkvs.client import send_request, receive_response
from rkvs.proto import encode_frame, decode_length

frame = encode_frame(b"hello")          # b"\x05\x00\x00\x00hello"
assert decode_length(frame[:4]) == 5

with socket.create_connection(("127.0.0.1", 8282)) as sock:
    send_request(sock, b"hello")
    print(receive_response(sock))       # b"hello"
```

A server can also be run from code. Passing port 0 picks a free port, which
is available as `server.address`:

```python
import threading

from rkvs.client import run
from rkvs.server import Server

with Server(0) as server:
    threading.Thread(target=server.serve_forever, daemon=True).start()
    host, port = server.address
    print(run(host, port, [b"a", b"bc"]))   # [b"a", b"bc"]
```

`Server.close()` stops the event loop and closes every socket; leaving the
`with` block calls it.

Module overview:

- `rkvs.proto`: `encode_frame`, `decode_length`, `read_exact` and
  `write_all`, with the constants `MAX_MSG_SIZE` (4096) and `HEADER_SIZE` (4).
  `encode_frame` and `decode_length` raise `MessageTooBigError` for payloads
  over 4096 bytes; `decode_length` raises `ProtocolError` for a header that
  is not 4 bytes long, and `read_exact` raises it when the peer closes early.
  `MessageTooBigError` is a subclass of `ProtocolError`.
- `rkvs.buffer`: `ByteBuffer`, a FIFO byte buffer that always holds fewer
  than `capacity` bytes (65536 by default). `append` raises
  `BufferOverflowError` when the buffer would reach its capacity; `consume(n)`
  removes and returns up to `n` bytes from the front.
- `rkvs.server`: `Server`, `Connection` and `create_listener`.
- `rkvs.client`: `send_request`, `receive_response` and `run`.

## What it does not do

Despite the name, there is no key-value storage. The server does not
interpret requests at all: every payload is echoed back unchanged, and
nothing is kept between requests or connections.