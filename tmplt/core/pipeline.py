# tmplt/core/pipeline.py
from typing import Any, Dict, Optional

import structlog

from tmplt.config.loader import load_values
from tmplt.config.settings import RenderConfig
from tmplt.core.files import Dir
from tmplt.core.templating import TemplateRenderer, build_template_context
from tmplt.exceptions import TemplateError

log = structlog.get_logger(__name__)


class RenderPipeline:
    # orchestrates a single synchronous render pass.
    def __init__(self, config: RenderConfig):
        self.config: RenderConfig = config
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")
        self.directory = Dir(config.base_dir, encoding=config.encoding, contain=config.contain_paths)
        self.values: Dict[str, Any] = {}

    def _build_renderer(self, template_source: Optional[str]) -> TemplateRenderer:
        if template_source is not None:
            return TemplateRenderer(template_source, self.directory, source_name="<stdin>")
        if self.config.template_path is None:
            raise TemplateError("No template path or template source given.")
        return TemplateRenderer.from_file(self.config.template_path, self.directory)

    def generate(self, template_source: Optional[str] = None) -> str:
        """
        Renders the configured template, or `template_source` when given.

        FileAccessError is not handled here: a missing file aborts the render
        and no partial output is produced.
        """
        self.log.info("render_pipeline_started", base_dir=str(self.config.base_dir),
                      template=str(self.config.template_path or "<stdin>"))
        self.values = load_values(self.config.values_files, self.config.set_values)
        renderer = self._build_renderer(template_source)
        context = build_template_context(self.config, self.values)
        output = renderer.render(context)
        self.log.info("render_pipeline_complete", output_length=len(output))
        return output
