"""Frontends - user interfaces.

    cli/    The mpv-socket command line
"""
