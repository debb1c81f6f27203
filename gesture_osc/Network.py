import socket

from pythonosc.osc_message_builder import OscMessageBuilder

from .Errors import SendError
from .helpers import DEFAULT_ADDRESS, DEFAULT_HOST, DEFAULT_PORT


def encode_point(point, address=DEFAULT_ADDRESS):
    """OSC datagram for one landmark: <address> ,ff x y"""
    builder = OscMessageBuilder(address=address)
    builder.add_arg(float(point.x), OscMessageBuilder.ARG_TYPE_FLOAT)
    builder.add_arg(float(point.y), OscMessageBuilder.ARG_TYPE_FLOAT)
    return builder.build().dgram


# ==========================================
# OSC OVER UDP
# ==========================================
class OscStreamer:
    """
    Fire-and-forget OSC sender. One UDP socket, opened once and reused for
    every send until close().
    """

    def __init__(self, host=DEFAULT_HOST, port=DEFAULT_PORT, address=DEFAULT_ADDRESS):
        self.addr = (host, int(port))
        self.address = address
        self.sock = None
        self.sent = 0
        self.failed = 0

    def open(self):
        if self.sock is not None:
            return self
        try:
            self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            self.sock.setblocking(False)  # never stall the frame loop
        except OSError as e:
            self.sock = None
            raise SendError(f"cannot create UDP socket: {e}") from e
        print(f"[NET] Streaming {self.address} to {self.addr[0]}:{self.addr[1]}")
        return self

    def close(self):
        if self.sock is not None:
            self.sock.close()
            self.sock = None
            print(f"[NET] Closed (sent={self.sent}, failed={self.failed})")

    @property
    def is_open(self):
        return self.sock is not None

    def send(self, point):
        if self.sock is None:
            self.failed += 1
            raise SendError("streamer is not open")
        msg = encode_point(point, self.address)
        try:
            self.sock.sendto(msg, self.addr)
        except OSError as e:
            self.failed += 1
            raise SendError(f"send to {self.addr[0]}:{self.addr[1]} failed: {e}") from e
        self.sent += 1

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
