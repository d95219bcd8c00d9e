__version__ = "0.5.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))
