"""Weather lookup utility: current conditions, 5-day forecast, saved preferences."""

__version__ = "0.1.0"
