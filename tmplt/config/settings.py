from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import structlog

log = structlog.get_logger(__name__)

DEFAULT_ENCODING = "utf-8"
DEFAULT_LOG_LEVEL = "warning"

@dataclass
class RenderConfig:
    # holds all configuration parameters for a single render.
    template_path: Optional[Path] = None
    base_dir: Optional[Path] = None
    values_files: List[Path] = field(default_factory=list)
    set_values: Dict[str, Any] = field(default_factory=dict)
    output_file: Optional[Path] = None
    encoding: str = DEFAULT_ENCODING
    contain_paths: bool = True

    def __post_init__(self):
        # relative lookups resolve against the working directory unless told otherwise.
        self.base_dir = Path(self.base_dir).resolve() if self.base_dir else Path.cwd().resolve()
        self.values_files = [Path(p) for p in self.values_files]
        if self.template_path is not None:
            self.template_path = Path(self.template_path)
        if self.output_file is not None:
            self.output_file = Path(self.output_file)
