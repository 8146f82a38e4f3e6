"""Transport - the duplex channel to mpv.

Available channels:
    StreamChannel: Unix domain socket or Windows named pipe.

Any object implementing the Channel protocol can back an MpvSocket.
"""

from mpv_socket.transport.channel import Channel, StreamChannel, open_channel

__all__ = [
    "Channel",
    "StreamChannel",
    "open_channel",
]
