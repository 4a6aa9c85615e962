import logging

from lrcat import lron, models

logger = logging.getLogger(__name__)

AG_POINT_CLASS_NAME = "AgPoint"

_CROP_KEYS = ("defaultCropTop", "defaultCropBottom", "defaultCropLeft", "defaultCropRight")


def parse_properties(text: str | None) -> models.Properties | None:
    """
    Parse and decode an image's `propertiesString`. Missing or malformed text yields None
    """
    if text is None:
        return None

    try:
        root = lron.parse(text)
    except lron.LronParseError as e:
        logger.debug(f"Ignoring malformed image properties: {e}")
        return None

    return decode_properties(root)


def decode_properties(root: lron.Object) -> models.Properties:
    """
    Interpret the parsed properties document. Each field is all or nothing: when any of its parts is missing the
    field is left unset.
    """
    if not isinstance(root, lron.Pair) or not isinstance(root.value, lron.Dict):
        return models.Properties()

    properties = root.value

    return models.Properties(
        loupe_focus=_decode_loupe_focus(properties.get("loupeFocusPoint")),
        crop_aspect_ratio=_decode_aspect_ratio(properties),
        default_crop=_decode_crop(properties),
    )


def _decode_loupe_focus(value: lron.Value | None) -> models.LoupeFocusPoint | None:
    if not isinstance(value, lron.Dict):
        return None

    class_name = value.get("_ag_className")
    if not isinstance(class_name, lron.Str) or class_name.value != AG_POINT_CLASS_NAME:
        return None

    x = lron.to_number(value.get("x"))
    y = lron.to_number(value.get("y"))
    if x is None or y is None:
        return None

    return models.LoupeFocusPoint(x=x, y=y)


def _decode_aspect_ratio(properties: lron.Dict) -> models.AspectRatio | None:
    height = properties.get("cropAspectH")
    width = properties.get("cropAspectW")

    if not isinstance(height, lron.Int) or not isinstance(width, lron.Int):
        return None

    return models.AspectRatio(width=width.value, height=height.value)


def _decode_crop(properties: lron.Dict) -> models.Crop | None:
    top, bottom, left, right = (lron.to_number(properties.get(key)) for key in _CROP_KEYS)

    if top is None or bottom is None or left is None or right is None:
        return None

    return models.Crop(top=top, bottom=bottom, left=left, right=right)
