"""Queries against the EC2 image catalogue."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)
_EPOCH_ZERO = datetime(1, 1, 1, tzinfo=timezone.utc)


class ImageQueryError(Exception):
    """The EC2 image query failed."""


def _parse_creation_date(value: Any) -> datetime:
    """Parse an RFC 3339 timestamp; anything unparsable sorts as oldest."""
    if not isinstance(value, str):
        return _EPOCH_ZERO
    match = _RFC3339.match(value)
    if match is None:
        return _EPOCH_ZERO
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction, zone = match.group(7), match.group(8)
    microsecond = int((fraction[1:] + "000000")[:6]) if fraction else 0
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    try:
        return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
    except ValueError:
        return _EPOCH_ZERO


def is_available(ec2: Any, image_id: str) -> bool:
    """Whether the image with the given ID exists and is in the available state."""
    try:
        output = ec2.describe_images(ImageIds=[image_id])
    except Exception as err:
        raise ImageQueryError(f'unable to find "{image_id}"') from err

    images = output.get("Images") or []
    if not images:
        return False
    return images[0].get("State") == "available"


def find_image(ec2: Any, name_pattern: str) -> str:
    """Return the ID of the newest available public image matching the pattern.

    An empty string is returned when nothing matches.
    """
    filters = [
        {"Name": "name", "Values": [name_pattern]},
        {"Name": "virtualization-type", "Values": ["hvm"]},
        {"Name": "root-device-type", "Values": ["ebs"]},
        {"Name": "is-public", "Values": ["true"]},
        {"Name": "state", "Values": ["available"]},
    ]
    try:
        output = ec2.describe_images(Filters=filters)
    except Exception as err:
        raise ImageQueryError("error querying AWS for images") from err

    images = output.get("Images") or []
    if not images:
        return ""
    if len(images) == 1:
        return images[0]["ImageId"]

    newest = max(images, key=lambda image: _parse_creation_date(image.get("CreationDate")))
    return newest["ImageId"]