"""Print the next ten changes of several properties at once."""

from __future__ import annotations

import itertools

from mpv_socket import MpvSocket, Property, load_config
from mpv_socket.core.logging_config import configure_logging

WATCHED = [
    Property.FILENAME,
    Property.SEEKING,
    Property.PAUSE,
    Property.VOLUME,
    Property.PERCENT_POS,
]


def main() -> None:
    configure_logging()

    with MpvSocket.from_config(load_config()) as mpv:
        with mpv.observe_properties(WATCHED) as changes:
            for change in itertools.islice(changes, 10):
                print(f'Property "{change.name}" changed to: {change.data}')


if __name__ == "__main__":
    main()
