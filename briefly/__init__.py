"""briefly: short-code allocation and resolution engine for a URL shortener."""

__version__ = '0.1.0'
