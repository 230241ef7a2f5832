from ekstools.ami.errors import AMINotFoundError, FailedResolutionError


def test_failed_resolution_message():
    err = FailedResolutionError("sa-east-1", "1.10", "t2.medium", "AmazonLinux2")
    assert str(err) == (
        "Unable to determine AMI for region sa-east-1, version 1.10, "
        "instance type t2.medium and image family AmazonLinux2"
    )


def test_failed_resolution_attributes():
    err = FailedResolutionError("us-east-1", "1.11", "p2.xlarge", "Ubuntu1804")
    assert (err.region, err.version, err.instance_type, err.image_family) == (
        "us-east-1",
        "1.11",
        "p2.xlarge",
        "Ubuntu1804",
    )


def test_failed_resolution_is_an_exception_with_message():
    err = FailedResolutionError("us-east-1", "1.10", "p2.xlarge", "Ubuntu1804")
    assert isinstance(err, Exception)
    assert err.image_family == "Ubuntu1804"
    assert str(err) == (
        "Unable to determine AMI for region us-east-1, version 1.10, "
        "instance type p2.xlarge and image family Ubuntu1804"
    )


def test_not_found_message():
    err = AMINotFoundError("ami-12345")
    assert str(err) == "Unable to find AMI ami-12345"
    assert err.ami == "ami-12345"