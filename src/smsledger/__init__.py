"""smsledger: bank SMS transaction extraction."""

__version__ = "0.1.0"
