"""Tag-absence filtering for AMIs."""

from collections.abc import Iterable
from typing import List

from .models import DEFAULT_TAG_KEY, Image


def lacks_tag(image: Image, tag_key: str = DEFAULT_TAG_KEY) -> bool:
    """Return True if no tag on ``image`` has key ``tag_key``."""
    return all(tag.key != tag_key for tag in image.tags)


def filter_untagged_images(
    images: Iterable[Image], tag_key: str = DEFAULT_TAG_KEY
) -> List[Image]:
    """
    Select the images that are missing ``tag_key``.

    The comparison is exact and case-sensitive, matching how EC2 treats tag
    keys. Images with no tags at all are always selected.

    Args:
        images: Images to inspect
        tag_key: Tag key whose absence selects an image

    Returns:
        The selected images, in their original order
    """
    return [image for image in images if lacks_tag(image, tag_key)]
