import pytest

from ekstools.ami.images import (
    DEFAULT_IMAGE_FAMILY,
    IMAGE_SEARCH_PATTERNS,
    STATIC_IMAGES,
    ImageClass,
    is_gpu_instance_type,
)


@pytest.mark.parametrize("instance_type", ["p2.xlarge", "p3.2xlarge"])
def test_gpu_instance_types(instance_type):
    assert is_gpu_instance_type(instance_type) is True


@pytest.mark.parametrize("instance_type", ["t2.medium", "m5.large"])
def test_non_gpu_instance_types(instance_type):
    assert is_gpu_instance_type(instance_type) is False


def test_image_class_lookup_by_value_and_name():
    assert ImageClass(0) is ImageClass.GENERAL
    assert ImageClass(1) is ImageClass.GPU
    assert ImageClass["GPU"] == 1


def test_image_class_rejects_unknown_value():
    with pytest.raises(ValueError):
        ImageClass(2)


def test_static_images_known_entries():
    general = ImageClass(0)
    gpu = ImageClass(1)
    assert STATIC_IMAGES["1.10"]["AmazonLinux2"][general]["us-west-2"] == "ami-0e7ee8863c8536cce"
    assert STATIC_IMAGES["1.10"]["AmazonLinux2"][gpu]["eu-west-1"] == "ami-08d23ed2de9320c90"
    assert STATIC_IMAGES["1.10"]["Ubuntu1804"][general]["us-west-2"] == "ami-6322011b"


def test_ubuntu_has_no_gpu_class():
    gpu = ImageClass(1)
    general = ImageClass(0)
    for version in STATIC_IMAGES:
        assert gpu not in STATIC_IMAGES[version]["Ubuntu1804"]
        assert general in STATIC_IMAGES[version]["Ubuntu1804"]


def test_every_class_covers_the_same_regions():
    region_sets = [
        frozenset(regions)
        for families in STATIC_IMAGES.values()
        for classes in families.values()
        for regions in classes.values()
    ]
    assert len(set(region_sets)) == 1
    assert len(region_sets[0]) == 13


def test_search_patterns_match_static_table_shape():
    assert set(IMAGE_SEARCH_PATTERNS) == set(STATIC_IMAGES)
    for version, families in IMAGE_SEARCH_PATTERNS.items():
        for family, classes in families.items():
            assert set(classes) == set(STATIC_IMAGES[version][family])


def test_default_family_has_general_images():
    general = ImageClass(0)
    assert STATIC_IMAGES["1.11"][DEFAULT_IMAGE_FAMILY][general]["us-west-2"] == "ami-0c28139856aaf9c3b"