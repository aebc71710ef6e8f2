"""PolySub — subtitle translation across interchangeable translation providers."""

__version__ = "0.1.0"
