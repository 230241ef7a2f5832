import pytest

from ekstools.ami.errors import FailedResolutionError
from ekstools.ami.resolvers import (
    AutoResolver,
    StaticDefaultResolver,
    StaticGPUResolver,
    resolve,
)
from ekstools.ami.search import ImageQueryError


@pytest.mark.parametrize(
    "region, version, instance_type, family, expected",
    [
        ("us-west-2", "1.10", "t2.medium", "AmazonLinux2", "ami-0e7ee8863c8536cce"),
        ("us-east-1", "1.10", "t2.medium", "AmazonLinux2", "ami-09a7630ca9ee4ee22"),
        ("eu-west-1", "1.10", "t2.medium", "AmazonLinux2", "ami-0103822d44fc52f97"),
        ("us-west-2", "1.10", "p2.xlarge", "AmazonLinux2", "ami-02e0b615d7749e016"),
        ("us-east-1", "1.10", "p3.2xlarge", "AmazonLinux2", "ami-00cce60e4c241de4c"),
        ("eu-west-1", "1.10", "p2.xlarge", "AmazonLinux2", "ami-08d23ed2de9320c90"),
        ("us-west-2", "1.10", "t2.medium", "Ubuntu1804", "ami-6322011b"),
        ("us-east-1", "1.10", "t2.medium", "Ubuntu1804", "ami-06fd8200ac0eb656d"),
        ("eu-west-1", "1.10", "t2.medium", "Ubuntu1804", "ami-07036622490f7e97b"),
    ],
)
def test_static_resolution(region, version, instance_type, family, expected):
    assert resolve(region, version, instance_type, family) == expected


@pytest.mark.parametrize(
    "region, version, instance_type, family",
    [
        ("sa-east-1", "1.10", "t2.medium", "AmazonLinux2"),
        ("ca-central-1", "1.10", "p3.2xlarge", "AmazonLinux2"),
        ("sa-east-1", "1.10", "t2.medium", "Ubuntu1804"),
        ("us-east-1", "1.10", "p2.xlarge", "Ubuntu1804"),
    ],
)
def test_static_resolution_failure(region, version, instance_type, family):
    with pytest.raises(FailedResolutionError) as excinfo:
        resolve(region, version, instance_type, family)
    expected = FailedResolutionError(region, version, instance_type, family)
    assert str(excinfo.value) == str(expected)
    assert (excinfo.value.region, excinfo.value.instance_type) == (region, instance_type)


def test_gpu_resolver_skips_non_gpu_types():
    assert StaticGPUResolver().resolve("us-west-2", "1.10", "t2.medium", "AmazonLinux2") == ""


def test_default_resolver_ignores_instance_type():
    result = StaticDefaultResolver().resolve("us-west-2", "1.10", "p2.xlarge", "AmazonLinux2")
    assert result == "ami-0e7ee8863c8536cce"


class FakeEC2:
    def __init__(self, expected_pattern, images, error=None):
        self.expected_pattern = expected_pattern
        self.images = images
        self.error = error
        self.calls = []

    def describe_images(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        names = [f["Values"][0] for f in kwargs.get("Filters", []) if f["Name"] == "name"]
        if self.expected_pattern not in names:
            raise LookupError(f"unexpected query {kwargs}")
        return {"Images": self.images}


def test_auto_resolver_single_available_image():
    ec2 = FakeEC2(
        "amazon-eks-node-1.10-v*",
        [{"ImageId": "ami-12345", "State": "available", "CreationDate": "2018-08-20T23:25:53.000Z"}],
    )
    result = AutoResolver(ec2).resolve("eu-west-1", "1.10", "t2.medium", "AmazonLinux2")
    assert result == "ami-12345"
    assert len(ec2.calls) == 1


def test_auto_resolver_no_images():
    ec2 = FakeEC2("amazon-eks-node-1.10-v*", [])
    result = AutoResolver(ec2).resolve("eu-west-1", "1.10", "t2.medium", "AmazonLinux2")
    assert result == ""
    assert len(ec2.calls) == 1


def test_auto_resolver_picks_newest_of_two():
    images = [
        {"CreationDate": "2018-08-20T23:25:53.000Z", "ImageId": "ami-1234", "State": "available"},
        {"CreationDate": "2018-09-12T22:21:11.000Z", "ImageId": "ami-5678", "State": "available"},
    ]
    ec2 = FakeEC2("amazon-eks-node-1.10-v*", images)
    result = AutoResolver(ec2).resolve("eu-west-1", "1.10", "t2.medium", "AmazonLinux2")
    assert result == "ami-5678"
    assert len(ec2.calls) == 1


def test_auto_resolver_gpu_pattern():
    ec2 = FakeEC2(
        "amazon-eks-gpu-node-1.10-*",
        [{"ImageId": "ami-12345", "State": "available", "CreationDate": "2018-08-20T23:25:53.000Z"}],
    )
    result = AutoResolver(ec2).resolve("eu-west-1", "1.10", "p2.xlarge", "AmazonLinux2")
    assert result == "ami-12345"
    assert len(ec2.calls) == 1


def test_auto_resolver_gpu_unsupported_family():
    ec2 = FakeEC2("unused", [])
    with pytest.raises(FailedResolutionError):
        AutoResolver(ec2).resolve("eu-west-1", "1.10", "p2.xlarge", "Ubuntu1804")
    assert ec2.calls == []


def test_auto_resolver_query_error():
    ec2 = FakeEC2("amazon-eks-node-1.10-v*", [], error=RuntimeError("boom"))
    with pytest.raises(ImageQueryError, match="error getting AMI"):
        AutoResolver(ec2).resolve("eu-west-1", "1.10", "t2.medium", "AmazonLinux2")