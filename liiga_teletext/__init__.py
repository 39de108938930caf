"""Finnish hockey league (Liiga) scores as a teletext page in the terminal."""

__version__ = "0.9.0"
