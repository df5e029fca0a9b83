"""Extract, convert and assemble typed table rows from raw data-source results."""

__version__ = "0.1.0"