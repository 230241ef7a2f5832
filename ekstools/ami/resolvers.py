"""Resolution of node images from region, version, instance type and family."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from ekstools.ami.errors import FailedResolutionError
from ekstools.ami.images import (
    IMAGE_SEARCH_PATTERNS,
    STATIC_IMAGES,
    ImageClass,
    is_gpu_instance_type,
)
from ekstools.ami.search import ImageQueryError, find_image

logger = logging.getLogger(__name__)


class Resolver(ABC):
    """A way of choosing the image for a region, version, instance type and family."""

    @abstractmethod
    def resolve(self, region: str, version: str, instance_type: str, image_family: str) -> str:
        """Return an image ID, or an empty string when this resolver has none."""


def _static_images(version: str, image_family: str) -> dict[ImageClass, dict[str, str]]:
    return STATIC_IMAGES.get(version, {}).get(image_family, {})


class StaticDefaultResolver(Resolver):
    """Resolves from the built-in table of general-purpose images."""

    def resolve(self, region: str, version: str, instance_type: str, image_family: str) -> str:
        logger.debug(
            "resolving AMI using StaticDefaultResolver for region %s, version %s, "
            "instanceType %s and imageFamily %s",
            region, version, instance_type, image_family,
        )
        regional = _static_images(version, image_family).get(ImageClass.GENERAL, {})
        return regional.get(region, "")


class StaticGPUResolver(Resolver):
    """Resolves from the built-in table of GPU images, for GPU instance types only."""

    def resolve(self, region: str, version: str, instance_type: str, image_family: str) -> str:
        logger.debug(
            "resolving AMI using StaticGPUResolver for region %s, instanceType %s "
            "and imageFamily %s",
            region, instance_type, image_family,
        )
        if not is_gpu_instance_type(instance_type):
            logger.debug(
                "can't resolve AMI using StaticGPUResolver as instance type %s is non-GPU",
                instance_type,
            )
            return ""

        regional = _static_images(version, image_family).get(ImageClass.GPU)
        if regional is None:
            logger.critical("image family %s doesn't support GPU image class", image_family)
            raise FailedResolutionError(region, version, instance_type, image_family)
        return regional.get(region, "")


class AutoResolver(Resolver):
    """Resolves by querying EC2 for the newest matching image."""

    def __init__(self, ec2: Any):
        self.ec2 = ec2

    def resolve(self, region: str, version: str, instance_type: str, image_family: str) -> str:
        logger.debug(
            "resolving AMI using AutoResolver for region %s, instanceType %s "
            "and imageFamily %s",
            region, instance_type, image_family,
        )
        patterns = IMAGE_SEARCH_PATTERNS.get(version, {}).get(image_family, {})
        pattern = patterns.get(ImageClass.GENERAL, "")
        if is_gpu_instance_type(instance_type):
            gpu_pattern = patterns.get(ImageClass.GPU)
            if gpu_pattern is None:
                logger.critical("image family %s doesn't support GPU image class", image_family)
                raise FailedResolutionError(region, version, instance_type, image_family)
            pattern = gpu_pattern

        try:
            return find_image(self.ec2, pattern)
        except ImageQueryError as err:
            raise ImageQueryError("error getting AMI") from err


DEFAULT_RESOLVERS: tuple[Resolver, ...] = (StaticGPUResolver(), StaticDefaultResolver())


def resolve(region: str, version: str, instance_type: str, image_family: str) -> str:
    """Resolve an image with the default resolvers, trying each in turn.

    Raises FailedResolutionError when none of them yields an image.
    """
    for resolver in DEFAULT_RESOLVERS:
        ami = resolver.resolve(region, version, instance_type, image_family)
        if ami:
            return ami
    raise FailedResolutionError(region, version, instance_type, image_family)