# infrastructure/steps/loader_registry.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from domain.steps.http import HttpRequestStep
from infrastructure.steps.base_loader import StepConfigLoaderBase, StepConfigLoadError
from infrastructure.steps.json_loader import JsonStepConfigLoader
from infrastructure.steps.yaml_loader import YamlStepConfigLoader


class StepConfigLoaderRegistry:
    def __init__(self) -> None:
        self._loaders: Dict[str, StepConfigLoaderBase] = {
            ".yaml": YamlStepConfigLoader(),
            ".yml": YamlStepConfigLoader(),
            ".json": JsonStepConfigLoader(),
        }

    def get_loader(self, path: Path) -> StepConfigLoaderBase:
        ext = path.suffix.lower()
        loader = self._loaders.get(ext)
        if loader is None:
            raise StepConfigLoadError(f"Unsupported step file format: {ext}")
        return loader

    def load(self, path: Path) -> List[HttpRequestStep]:
        return self.get_loader(path).load_from_file(path)
