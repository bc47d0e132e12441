# tmplt/core/templating/renderer.py
"""
Contains the TemplateRenderer class responsible for compiling Handlebars
templates and rendering them with the file and codec helpers registered.
"""
from pathlib import Path
from typing import Any, Callable, Dict
import pybars # type: ignore
import structlog

from tmplt.core.files import Dir
from tmplt.exceptions import FileAccessError, TemplateError

from .helpers import BUILTIN_HELPERS, build_file_helpers

log = structlog.get_logger(__name__)

class TemplateRenderer:
    """Compiles one Handlebars template and renders it against a base directory."""
    def __init__(self, template_source: str, directory: Dir, source_name: str = "<string>"):
        self.directory = directory
        self.template_source_name = source_name
        self.handlebars_compiler = pybars.Compiler()

        self.registered_helpers: Dict[str, Callable] = {
            **BUILTIN_HELPERS,
            **build_file_helpers(directory),
        }

        try:
            self.compiled_template_function = self.handlebars_compiler.compile(template_source)
            log.debug("template_compiled_successfully", source=self.template_source_name)
        except Exception as e:
            log.error("template_compilation_failed", source=self.template_source_name, error=str(e))
            raise TemplateError(f"Failed to compile template from '{self.template_source_name}': {e}") from e

    @classmethod
    def from_file(cls, template_path: Path, directory: Dir) -> "TemplateRenderer":
        log.info("loading_template_from_path", path=str(template_path))
        try:
            source = template_path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateError(f"Failed to read template file {template_path}: {e}") from e
        return cls(source, directory, source_name=str(template_path))

    def render(self, template_context_data: Dict[str, Any]) -> str:
        """
        Renders the compiled template with the given context data.

        FileAccessError from a file helper is re-raised untouched so the caller
        aborts the whole render; anything else becomes a TemplateError.
        """
        log.info("rendering_template_with_context", source=self.template_source_name,
                 context_keys=list(template_context_data.keys()))
        try:
            rendered = self.compiled_template_function(
                template_context_data, helpers=self.registered_helpers
            )
        except FileAccessError:
            raise
        except Exception as e:
            log.error("template_rendering_error_occurred", source=self.template_source_name,
                      error_message=str(e), exc_info=True)
            raise TemplateError(f"Template render failed for '{self.template_source_name}': {e}") from e
        log.debug("template_rendered_successfully", source=self.template_source_name)
        return str(rendered)
