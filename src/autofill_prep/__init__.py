"""Grounded job-posting and company brief generation."""

__version__ = "0.1.0"
