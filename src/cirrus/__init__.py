"""Credential and configuration management for the cirrus server."""

__version__ = "0.1.0"
