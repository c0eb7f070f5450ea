"""Compile EUI theme sources into stylesheets, variable JSON and type declarations."""

__version__ = "0.1.0"
