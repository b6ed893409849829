from infrastructure.steps.base_loader import StepConfigLoadError, StepConfigLoaderBase
from infrastructure.steps.json_loader import JsonStepConfigLoader
from infrastructure.steps.loader_registry import StepConfigLoaderRegistry
from infrastructure.steps.yaml_loader import YamlStepConfigLoader

__all__ = [
    "StepConfigLoadError",
    "StepConfigLoaderBase",
    "StepConfigLoaderRegistry",
    "YamlStepConfigLoader",
    "JsonStepConfigLoader",
]
