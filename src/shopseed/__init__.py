"""shopseed - seed the commerce database from CSV exports."""

__version__ = "0.1.0"
