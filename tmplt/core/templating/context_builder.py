# tmplt/core/templating/context_builder.py
"""
Builds the context dictionary passed to Handlebars templates.
"""
from typing import Any, Dict, Optional
import structlog

from tmplt.config.settings import RenderConfig
from tmplt.exceptions import TemplateError

log = structlog.get_logger(__name__)

def build_template_context(config: RenderConfig, values: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Constructs the context with the merged values tree and template metadata."""
    if not (config.base_dir and config.base_dir.is_absolute()):
        raise TemplateError("config.base_dir is not set or not absolute for template context.")

    template_name = config.template_path.name if config.template_path else "<stdin>"
    context: Dict[str, Any] = {
        "Values": values or {},
        "Template": {"Name": template_name, "BaseDir": str(config.base_dir)},
        "BaseDir": str(config.base_dir),
    }
    log.debug("template_context_prepared_with_keys", keys=list(context.keys()))
    return context
