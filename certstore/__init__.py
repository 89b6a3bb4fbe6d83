"""REST backend for certificate records and their images."""

__version__ = "0.1.0"
