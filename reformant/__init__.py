"""Speech analysis windows, linear prediction, peak finding and an INI file library."""

__version__ = "0.1.0"