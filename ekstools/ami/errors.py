"""Errors raised while resolving machine images."""


class FailedResolutionError(Exception):
    """No image could be determined for a region, version, type and family."""

    def __init__(self, region: str, version: str, instance_type: str, image_family: str):
        self.region = region
        self.version = version
        self.instance_type = instance_type
        self.image_family = image_family
        super().__init__(
            f"Unable to determine AMI for region {region}, version {version}, "
            f"instance type {instance_type} and image family {image_family}"
        )


class AMINotFoundError(Exception):
    """A given image could not be found."""

    def __init__(self, ami: str):
        self.ami = ami
        super().__init__(f"Unable to find AMI {ami}")