"""rdcalc: a small interactive expression interpreter built around a recursive-descent parser."""

__version__ = "0.1.0"
