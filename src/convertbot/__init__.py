"""ConvertBot - convert a single local media file between containers and codecs."""

__version__ = "0.1.0"
