"""hrmon: live heart-rate session coordinator with fire-and-forget HTTP delivery."""

__version__ = "0.1.0"
