"""Personal assistant with a structured, semantically searchable memory."""

__version__ = "0.1.0"
