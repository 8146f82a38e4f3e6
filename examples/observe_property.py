"""Query a few values, then print the next ten playback times.

Start mpv with --input-ipc-server=/tmp/mpv-socket first (on Windows the
default is the named pipe \\\\.\\pipe\\mpv-socket).
"""

from __future__ import annotations

import itertools

from mpv_socket import MpvSocket, Property, as_float, as_str, load_config
from mpv_socket.core.logging_config import configure_logging


def main() -> None:
    configure_logging()
    config = load_config()

    with MpvSocket.from_config(config) as mpv:
        print(f"Client name: {mpv.client_name()}")
        print(f"Version: {mpv.get_version()}")
        print(f"Filename: {mpv.get_property(Property.FILENAME, as_str)}")

        with mpv.observe_property(Property.PLAYBACK_TIME, as_float) as playback_times:
            for playback_time in itertools.islice(playback_times, 10):
                print(f"Playback time: {playback_time}")


if __name__ == "__main__":
    main()
