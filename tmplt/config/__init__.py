from .settings import RenderConfig
from .loader import load_and_merge_configs, load_values

__all__ = ["RenderConfig", "load_and_merge_configs", "load_values"]
