"""Websocket streaming: subscription frames, the receive loop and its channel."""

from bpxclient.ws.channel import ChannelClosedError, StreamChannel
from bpxclient.ws.subscriber import StreamSubscriber, build_subscribe_frame, is_private_stream

__all__ = [
    "ChannelClosedError",
    "StreamChannel",
    "StreamSubscriber",
    "build_subscribe_frame",
    "is_private_stream",
]
