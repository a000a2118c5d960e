"""colorbuddy — extract a colour palette from images."""

__version__ = '1.0.1'
