"""
Driftwood RPG - Asset Boundary
==============================
Images and sounds are exposed as small handles with a ``ready`` flag.
A missing or undecodable file leaves the handle not-ready forever; callers
skip that visual or sound instead of failing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pygame

logger = logging.getLogger(__name__)

ASSET_ROOT = Path(__file__).resolve().parents[2] / "assets"


@dataclass
class ImageAsset:
    key: str
    surface: pygame.Surface | None = None

    @property
    def ready(self) -> bool:
        return self.surface is not None


@dataclass
class SoundAsset:
    key: str
    sound: pygame.mixer.Sound | None = None

    @property
    def ready(self) -> bool:
        return self.sound is not None


@dataclass
class AssetLibrary:
    """Keyed collection of image and sound handles."""

    root: Path = ASSET_ROOT
    images: dict[str, ImageAsset] = field(default_factory=dict)
    sounds: dict[str, SoundAsset] = field(default_factory=dict)

    def image(self, key: str) -> ImageAsset:
        return self.images.setdefault(key, ImageAsset(key))

    def sound(self, key: str) -> SoundAsset:
        return self.sounds.setdefault(key, SoundAsset(key))

    def load_image(self, key: str, filename: str) -> ImageAsset:
        asset = self.image(key)
        path = self.root / "images" / filename
        if not path.exists():
            logger.info("[Assets] image '%s' not found at %s", key, path)
            return asset
        try:
            asset.surface = pygame.image.load(str(path))
        except pygame.error as e:
            logger.warning("[Assets] failed to load image '%s': %s", key, e)
        return asset

    def load_sound(self, key: str, filename: str) -> SoundAsset:
        asset = self.sound(key)
        path = self.root / "audio" / filename
        if not path.exists():
            logger.info("[Assets] sound '%s' not found at %s", key, path)
            return asset
        if not pygame.mixer.get_init():
            logger.info("[Assets] mixer unavailable, sound '%s' stays silent", key)
            return asset
        try:
            asset.sound = pygame.mixer.Sound(str(path))
        except pygame.error as e:
            logger.warning("[Assets] failed to load sound '%s': %s", key, e)
        return asset
