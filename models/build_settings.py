# models/build_settings.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class CompressionLevel(str, Enum):
    NONE = 'none'
    FAST = 'fast'
    BEST = 'best'


@dataclass
class SplashSettings:
    enabled: bool = True
    duration_s: float = 2.5
    image_path: str = ''


@dataclass
class BuildSettings:
    product_name: str = 'Novo Projeto'
    version: str = '1.0.0'
    build_number: int = 1
    development_build: bool = False
    compression: CompressionLevel = CompressionLevel.FAST
    splash: SplashSettings = field(default_factory=SplashSettings)
    scenes: List[str] = field(default_factory=list)

    @property
    def display_version(self) -> str:
        return f"{self.version} ({self.build_number})"
