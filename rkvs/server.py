"""Non-blocking echo server speaking the length-prefixed protocol."""

import argparse
import selectors
import socket
import sys
import threading

from rkvs.buffer import BufferOverflowError, ByteBuffer
from rkvs.proto import HEADER_SIZE, MessageTooBigError, decode_length, encode_frame

LISTEN_ADDR = "127.0.0.1"
MAX_CONNECTIONS = 64


def create_listener(port, host=LISTEN_ADDR):
    """Return a non-blocking listening TCP socket bound to ``host:port``."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(5)
        sock.setblocking(False)
    except OSError:
        sock.close()
        raise
    return sock


class Connection:
    """State of one client connection."""

    def __init__(self, sock):
        sock.setblocking(False)
        self.sock = sock
        self.want_read = True
        self.want_write = False
        self.want_close = False
        self.incoming = ByteBuffer()
        self.outgoing = ByteBuffer()

    def fileno(self):
        return self.sock.fileno()

    def try_one_request(self):
        """Parse and answer one buffered request; return whether one was handled."""
        if len(self.incoming) <= HEADER_SIZE:
            return False
        try:
            length = decode_length(self.incoming[:HEADER_SIZE])
        except MessageTooBigError:
            print("Message too big", file=sys.stderr)
            self.want_close = True
            return False
        end = HEADER_SIZE + length
        if end > len(self.incoming):
            return False

        request = self.incoming[HEADER_SIZE:end]
        print(f"Client sent: {{{length}, {request.decode('latin-1')}}}")
        try:
            self.outgoing.append(encode_frame(request))
        except BufferOverflowError:
            print("Output buffer full", file=sys.stderr)
            self.want_close = True
            return False
        self.incoming.consume(end)
        return True

    def handle_read(self):
        """Read what is available, answer complete requests and start writing."""
        if self.incoming.available <= 0:
            self.want_close = True
            return
        try:
            data = self.sock.recv(self.incoming.available)
        except BlockingIOError:
            return
        except OSError as exc:
            print(f"read() error, {exc.strerror or exc}", file=sys.stderr)
            self.want_close = True
            return
        if not data:
            print("Client closed" if not self.incoming else "Unexpected EOF")
            self.want_close = True
            return

        self.incoming.append(data)
        while self.try_one_request():
            pass

        if self.outgoing:
            self.want_read = False
            self.want_write = True
            self.handle_write()

    def handle_write(self):
        """Send as much pending output as the socket accepts."""
        if not self.outgoing:
            return
        try:
            sent = self.sock.send(bytes(self.outgoing))
        except BlockingIOError:
            return
        except OSError as exc:
            print(f"write() error, {exc.strerror or exc}", file=sys.stderr)
            self.want_close = True
            return
        self.outgoing.consume(sent)
        if not self.outgoing:
            self.want_read = True
            self.want_write = False


class Server:
    """Event loop serving many connections from one thread."""

    _POLL_INTERVAL = 0.1

    def __init__(self, port, host=LISTEN_ADDR, max_connections=MAX_CONNECTIONS):
        self._listener = create_listener(port, host)
        self.address = self._listener.getsockname()
        self.max_connections = max_connections
        self.connections = {}
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._listener, selectors.EVENT_READ)
        self._stopping = threading.Event()
        self._serving = False
        self._shutdown_lock = threading.Lock()
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def serve_forever(self):
        """Run the event loop until ``close`` is called."""
        self._serving = True
        try:
            while not self._stopping.is_set():
                for key, mask in self._selector.select(self._POLL_INTERVAL):
                    if key.fileobj is self._listener:
                        self._accept()
                    else:
                        self._service(key, mask)
        finally:
            self._serving = False
            self._shutdown()

    def close(self):
        """Stop the event loop and close every socket."""
        self._stopping.set()
        if not self._serving:
            self._shutdown()

    def _accept(self):
        try:
            sock, _ = self._listener.accept()
        except BlockingIOError:
            return
        except OSError as exc:
            print(f"accept() error, {exc}", file=sys.stderr)
            return
        if len(self.connections) >= self.max_connections:
            sock.close()
            raise RuntimeError("exceeded max connections")
        conn = Connection(sock)
        fd = conn.fileno()
        self.connections[fd] = conn
        self._selector.register(sock, selectors.EVENT_READ, conn)
        print(f"Incoming connection, fd: {fd}")

    def _service(self, key, mask):
        conn = key.data
        if mask & selectors.EVENT_READ and conn.want_read:
            conn.handle_read()
        if mask & selectors.EVENT_WRITE and conn.want_write:
            conn.handle_write()

        events = (selectors.EVENT_READ if conn.want_read else 0) | (
            selectors.EVENT_WRITE if conn.want_write else 0
        )
        if conn.want_close or not events:
            self._drop(conn)
        elif events != key.events:
            self._selector.modify(conn.sock, events, conn)

    def _drop(self, conn):
        fd = conn.fileno()
        self._selector.unregister(conn.sock)
        conn.sock.close()
        self.connections.pop(fd, None)
        print(f"Closed connection, fd: {fd}")

    def _shutdown(self):
        with self._shutdown_lock:
            if self._closed:
                return
            self._closed = True
            for conn in self.connections.values():
                conn.sock.close()
            self.connections.clear()
            self._listener.close()
            self._selector.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the echo server.")
    parser.add_argument("port", type=int, help="listening port")
    args = parser.parse_args(argv)

    try:
        server = Server(args.port)
    except OSError as exc:
        print(f"listen error: {exc}", file=sys.stderr)
        return 1

    print(f"Listening on {LISTEN_ADDR}:{args.port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        return 0
    except RuntimeError as exc:
        print(f"fatal: {exc}", file=sys.stderr)
        return 1
    finally:
        server.close()
    return 0