import socket

import pytest
from pythonosc.osc_message import OscMessage

from gesture_osc import LandmarkPoint, OscStreamer, SendError, encode_point


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


def test_encode_point_is_gesture_message_with_two_floats():
    dgram = encode_point(LandmarkPoint("thumb_tip", 0.25, 0.5))
    msg = OscMessage(dgram)

    assert msg.address == "/gesture"
    assert b",ff" in dgram
    assert msg.params == [0.25, 0.5]


def test_point_round_trips_over_udp(receiver):
    port = receiver.getsockname()[1]
    with OscStreamer("127.0.0.1", port) as streamer:
        streamer.send(LandmarkPoint("thumb_tip", 0.42, 0.77))
        data, _ = receiver.recvfrom(1024)

    msg = OscMessage(data)
    assert msg.address == "/gesture"
    x, y = msg.params
    assert x == pytest.approx(0.42, abs=1e-6)
    assert y == pytest.approx(0.77, abs=1e-6)
    assert streamer.sent == 1
    assert not streamer.is_open


def test_sends_keep_call_order_and_custom_address(receiver):
    port = receiver.getsockname()[1]
    points = [LandmarkPoint("thumb_tip", i / 10, 1 - i / 10) for i in range(4)]
    with OscStreamer("127.0.0.1", port, address="/hand/thumb") as streamer:
        for p in points:
            streamer.send(p)
        got = [OscMessage(receiver.recvfrom(1024)[0]) for _ in points]

    assert {m.address for m in got} == {"/hand/thumb"}
    assert [round(m.params[0], 4) for m in got] == [0.0, 0.1, 0.2, 0.3]


def test_socket_is_reused_between_sends(receiver):
    port = receiver.getsockname()[1]
    streamer = OscStreamer("127.0.0.1", port).open()
    sock = streamer.sock
    streamer.send(LandmarkPoint("thumb_tip", 0.1, 0.1))
    streamer.send(LandmarkPoint("thumb_tip", 0.2, 0.2))
    assert streamer.sock is sock
    assert streamer.open() is streamer
    assert streamer.sock is sock
    streamer.close()


def test_send_on_closed_streamer_raises_send_error():
    streamer = OscStreamer()
    with pytest.raises(SendError):
        streamer.send(LandmarkPoint("thumb_tip", 0.5, 0.5))
    assert streamer.failed == 1


def test_transport_error_becomes_send_error():
    class BrokenSocket:
        def sendto(self, data, addr):
            raise OSError("network unreachable")

        def close(self):
            pass

    streamer = OscStreamer()
    streamer.sock = BrokenSocket()
    with pytest.raises(SendError) as info:
        streamer.send(LandmarkPoint("thumb_tip", 0.5, 0.5))
    assert isinstance(info.value.__cause__, OSError)
    assert (streamer.sent, streamer.failed) == (0, 1)


def test_default_destination():
    streamer = OscStreamer()
    assert streamer.addr == ("127.0.0.1", 8732)
    assert streamer.address == "/gesture"
