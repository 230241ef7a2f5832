"""Image families, classes and the built-in table of images per region."""

from __future__ import annotations

from enum import IntEnum

IMAGE_FAMILY_AMAZON_LINUX2 = "AmazonLinux2"
IMAGE_FAMILY_UBUNTU1804 = "Ubuntu1804"
DEFAULT_IMAGE_FAMILY = IMAGE_FAMILY_AMAZON_LINUX2

RESOLVER_STATIC = "static"
RESOLVER_AUTO = "auto"


class ImageClass(IntEnum):
    """Variations of node images."""

    GENERAL = 0
    GPU = 1


_GPU_INSTANCE_PREFIXES = ("p2", "p3")


def is_gpu_instance_type(instance_type: str) -> bool:
    """Whether the instance type carries GPUs."""
    return instance_type.startswith(_GPU_INSTANCE_PREFIXES)


IMAGE_SEARCH_PATTERNS: dict[str, dict[str, dict[ImageClass, str]]] = {
    "1.10": {
        IMAGE_FAMILY_AMAZON_LINUX2: {
            ImageClass.GENERAL: "amazon-eks-node-1.10-v*",
            ImageClass.GPU: "amazon-eks-gpu-node-1.10-*",
        },
        IMAGE_FAMILY_UBUNTU1804: {
            ImageClass.GENERAL: "ubuntu-eks/1.10.3/*",
        },
    },
    "1.11": {
        IMAGE_FAMILY_AMAZON_LINUX2: {
            ImageClass.GENERAL: "amazon-eks-node-1.11-v*",
            ImageClass.GPU: "amazon-eks-gpu-node-1.11-*",
        },
        IMAGE_FAMILY_UBUNTU1804: {
            ImageClass.GENERAL: "ubuntu-eks/1.11.5/*",
        },
    },
}

# Regions covered by the built-in table, in the order image ids are listed below.
_REGIONS = (
    "ap-northeast-1", "ap-northeast-2", "ap-south-1", "ap-southeast-1",
    "ap-southeast-2", "eu-central-1", "eu-north-1", "eu-west-1",
    "eu-west-2", "eu-west-3", "us-east-1", "us-east-2", "us-west-2",
)


def _by_region(*image_ids: str) -> dict[str, str]:
    """Pair image ids with regions; an empty id means no image in that region."""
    return dict(zip(_REGIONS, image_ids, strict=True))


def _no_images() -> dict[str, str]:
    return dict.fromkeys(_REGIONS, "")


STATIC_IMAGES: dict[str, dict[str, dict[ImageClass, dict[str, str]]]] = {
    "1.10": {
        IMAGE_FAMILY_AMAZON_LINUX2: {
            ImageClass.GPU: _by_region(
                "ami-061f5b653b1a98557", "ami-0a8159b97b9a7e078", "",
                "ami-02aa3e8ad27163456", "ami-0679fa5d74309eb79",
                "ami-0c1746c6d5d61b4d3", "ami-63aa231d", "ami-08d23ed2de9320c90",
                "", "", "ami-00cce60e4c241de4c", "ami-0bbfeb020c5ec10ee",
                "ami-02e0b615d7749e016",
            ),
            ImageClass.GENERAL: _by_region(
                "ami-0e831f9f650f2f8ab", "ami-0378f1fac83cbf438",
                "ami-0ac369c3b2206d2ea", "ami-0fa3f3282eb89b795",
                "ami-01d0ab2e9506b8db0", "ami-0b8d223ce03e6fabc",
                "ami-09be5053dbb1a515d", "ami-0103822d44fc52f97",
                "ami-017c4d847b606e125", "ami-0c7fc5c0784b58207",
                "ami-09a7630ca9ee4ee22", "ami-02a8a05e480e902e2",
                "ami-0e7ee8863c8536cce",
            ),
        },
        IMAGE_FAMILY_UBUNTU1804: {
            ImageClass.GENERAL: _by_region(
                "ami-0d1700e2b1ee4a7d1", "ami-0482114d05cc56007",
                "ami-000a5d690f010e1ff", "ami-02c9850ed9fb6e7dd",
                "ami-0e862d31afc398f91", "ami-0734d5f3fa10dcafc", "",
                "ami-07036622490f7e97b", "ami-0ca3d8ce38fd258f3",
                "ami-073ba0927e3142658", "ami-06fd8200ac0eb656d",
                "ami-0866798422f5d546b", "ami-6322011b",
            ),
        },
    },
    "1.11": {
        IMAGE_FAMILY_AMAZON_LINUX2: {
            ImageClass.GPU: _by_region(
                "ami-0880d3b662781d6d6", "ami-0c3db49d90afa0f1e", "",
                "ami-0c903ead334faa6a3", "ami-02d7e0f064bd7d8e0",
                "ami-0939712219b80b525", "ami-18bf3666", "ami-014969e8d07b2fc9f",
                "", "", "ami-0558da965e2fc68b0", "ami-0c3afad2ea917168e",
                "ami-06045aa686f46dd58",
            ),
            ImageClass.GENERAL: _by_region(
                "ami-07fdc9272ce5b0ce5", "ami-091e0e1906e653417",
                "ami-0b6f791fc54125a8a", "ami-038d55c26bf01998f",
                "ami-0e07b5081bb77d540", "ami-032ed5525d4df2de3",
                "ami-0154b2479ba20f8bb", "ami-098fb7e9b507904e7",
                "ami-0d69ab00cb41d6eda", "ami-018ebb030cf6ae00b",
                "ami-0535079027b14e972", "ami-0484545fe7d3da96f",
                "ami-0c28139856aaf9c3b",
            ),
        },
        IMAGE_FAMILY_UBUNTU1804: {
            ImageClass.GENERAL: _no_images(),
        },
    },
}