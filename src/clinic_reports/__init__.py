"""Financial reporting for an aesthetics clinic's transactions and expenses."""

__version__ = "0.1.0"
