"""HireForm: recruitment backend that prints filled application forms."""

__version__ = "0.1.0"
