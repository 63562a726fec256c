"""Presentation layer: command line front end."""
