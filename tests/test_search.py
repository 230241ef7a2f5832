import pytest

from ekstools.ami.search import ImageQueryError, find_image, is_available


class FakeEC2:
    def __init__(self, images=None, error=None):
        self.images = images or []
        self.error = error
        self.calls = []

    def describe_images(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"Images": list(self.images)}


def _filter_values(call, name):
    for flt in call["Filters"]:
        if flt["Name"] == name:
            return flt["Values"]
    return None


def test_find_image_single():
    ec2 = FakeEC2([{"ImageId": "ami-12345", "State": "available", "CreationDate": "2018-08-20T23:25:53.000Z"}])
    assert find_image(ec2, "amazon-eks-node-1.10-v*") == "ami-12345"
    assert len(ec2.calls) == 1
    assert _filter_values(ec2.calls[0], "name") == ["amazon-eks-node-1.10-v*"]
    assert _filter_values(ec2.calls[0], "state") == ["available"]


def test_find_image_none():
    ec2 = FakeEC2([])
    assert find_image(ec2, "amazon-eks-node-1.10-v*") == ""
    assert len(ec2.calls) == 1


def test_find_image_picks_newest():
    ec2 = FakeEC2(
        [
            {"ImageId": "ami-1234", "State": "available", "CreationDate": "2018-08-20T23:25:53.000Z"},
            {"ImageId": "ami-5678", "State": "available", "CreationDate": "2018-09-12T22:21:11.000Z"},
        ]
    )
    assert find_image(ec2, "amazon-eks-node-1.10-v*") == "ami-5678"


def test_find_image_newest_regardless_of_order():
    images = [
        {"ImageId": "ami-5678", "State": "available", "CreationDate": "2018-09-12T22:21:11.000Z"},
        {"ImageId": "ami-1234", "State": "available", "CreationDate": "2018-08-20T23:25:53.000Z"},
    ]
    assert find_image(FakeEC2(images), "p") == find_image(FakeEC2(list(reversed(images))), "p")


def test_find_image_unparsable_date_sorts_last():
    ec2 = FakeEC2(
        [
            {"ImageId": "ami-bad", "State": "available", "CreationDate": "not a date"},
            {"ImageId": "ami-1234", "State": "available", "CreationDate": "2018-08-20T23:25:53.000Z"},
        ]
    )
    assert find_image(ec2, "p") == "ami-1234"


def test_find_image_wraps_errors():
    cause = RuntimeError("Some random error from AWS")
    with pytest.raises(ImageQueryError, match="error querying AWS for images") as info:
        find_image(FakeEC2(error=cause), "p")
    assert info.value.__cause__ is cause


def test_is_available_true():
    ec2 = FakeEC2([{"ImageId": "ami-12345", "State": "available"}])
    assert is_available(ec2, "ami-12345") is True
    assert ec2.calls == [{"ImageIds": ["ami-12345"]}]


def test_is_available_pending():
    assert is_available(FakeEC2([{"ImageId": "ami-12345", "State": "pending"}]), "ami-12345") is False


def test_is_available_missing():
    assert is_available(FakeEC2([]), "ami-12345") is False


def test_is_available_wraps_errors():
    with pytest.raises(ImageQueryError, match="ami-12345"):
        is_available(FakeEC2(error=RuntimeError("boom")), "ami-12345")