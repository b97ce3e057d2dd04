"""Framed request/response TCP echo server and client."""

__version__ = "0.1.0"
__all__ = ["buffer", "proto", "client", "server"]