"""Workspace, file-system, font and package model for a Typst language server."""

__version__ = "0.1.0"