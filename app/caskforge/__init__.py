"""caskforge - Build macOS applications from source and install them."""

__version__ = "0.1.0"
