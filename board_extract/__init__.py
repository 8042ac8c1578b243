"""board-extract: export monday.com boards as flat JSON records."""

from board_extract._version import __version__

__all__ = ["__version__"]
