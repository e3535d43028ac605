"""Room makeover: upload a room photo, get back a restyled rendering."""

__version__ = "0.1.0"
