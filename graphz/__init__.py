"""GRAPHZ: searchable gallery of graph records."""

__version__ = "0.1.0"
