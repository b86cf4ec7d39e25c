"""Storefront admin back-office API: category hierarchy management."""

__version__ = "0.1.0"
