# tmplt/core/templating/__init__.py
"""
Templating module for tmplt.

Provides the TemplateRenderer for compiling and rendering Handlebars templates,
and build_template_context for preparing the data they see.
"""
from .renderer import TemplateRenderer
from .context_builder import build_template_context

__all__ = [
    "TemplateRenderer",
    "build_template_context"
]
