"""tmplt: file access and data serialization helpers for Handlebars templates."""

__version__ = "0.3.0"
