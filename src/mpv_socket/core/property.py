"""Catalogue of known mpv properties.

Each member's value is the property name used on the wire.
Official documentation: https://mpv.io/manual/master/#properties
"""

from __future__ import annotations

from enum import Enum


class Property(str, Enum):
    """Known mpv properties. (RW) marks generally writable properties."""

    AUDIO_SPEED_CORRECTION = "audio-speed-correction"  # Audio speed factor, usually 1
    VIDEO_SPEED_CORRECTION = "video-speed-correction"  # Video speed factor, usually 1
    DISPLAY_SYNC_ACTIVE = "display-sync-active"  # Whether --video-sync=display is active
    FILENAME = "filename"  # Played file, path stripped
    FILENAME_NO_EXT = "filename/no-ext"  # Like filename, extension stripped
    FILE_SIZE = "file-size"  # Source length in bytes
    ESTIMATED_FRAME_COUNT = "estimated-frame-count"  # Estimate from fps and length
    ESTIMATED_FRAME_NUMBER = "estimated-frame-number"  # Estimate of current frame
    PATH = "path"  # Full path as passed to mpv
    STREAM_OPEN_FILENAME = "stream-open-filename"  # Actual media URL (ytdl)
    MEDIA_TITLE = "media-title"  # title tag, else filename
    FILE_FORMAT = "file-format"  # Symbolic file format name(s)
    CURRENT_DEMUXER = "current-demuxer"  # Current demuxer name
    STREAM_PATH = "stream-path"  # Stream layer filename
    STREAM_POS = "stream-pos"  # Raw byte position in source stream
    STREAM_END = "stream-end"  # Raw end position in bytes
    DURATION = "duration"  # Duration in seconds, an estimate
    PERCENT_POS = "percent-pos"  # (RW) Position in file, 0-100
    TIME_POS = "time-pos"  # (RW) Position in file, seconds
    TIME_START = "time-start"  # Deprecated, always 0
    TIME_REMAINING = "time-remaining"  # Remaining length in seconds
    PLAYBACK_TIME = "playback-time"  # (RW) Position clamped to file range
    SEEKING = "seeking"  # Whether the player is seeking
    VOLUME = "volume"  # (RW) Volume in percent
    PAUSE = "pause"  # (RW) Pause state

    def __str__(self) -> str:
        return self.value

    @property
    def deprecated(self) -> bool:
        return self is Property.TIME_START

    @classmethod
    def parse(cls, text: str | Property) -> Property:
        """Look up a property by wire name or kebab-case member name.

        Args:
            text: e.g. "filename/no-ext" or "filename-no-ext".

        Returns:
            The matching Property.

        Raises:
            ValueError: If no property matches.
        """
        if isinstance(text, Property):
            return text
        try:
            return cls(text)
        except ValueError:
            pass
        member = text.replace("-", "_").upper()
        if member in cls.__members__:
            return cls.__members__[member]
        raise ValueError(f"unknown property: {text!r}")
