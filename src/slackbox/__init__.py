"""Track unread chat conversations and acknowledge them up to a watermark."""

__version__ = "0.1.0"
