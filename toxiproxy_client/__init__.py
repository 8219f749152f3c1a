"""Synchronous client for the Toxiproxy server: proxies, toxics and errors."""

__version__ = "0.1.6"

__all__ = ["client", "errors", "http_client", "proxy", "toxic"]