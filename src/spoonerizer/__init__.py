"""Spoonerizer: find spoonerisms by swapping leading phonetic segments."""

__version__ = "0.1.0"
