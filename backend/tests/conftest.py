"""Shared test fixtures."""

from __future__ import annotations

from urllib.parse import urlsplit

import pytest

from imageproxy.models.options import ImageFormat, Options
from imageproxy.routing.registry import SourceConfiguration, SourceRegistry, get_registry, set_registry


EMPTY_OPTIONS = Options()

# Every field set, used for encode/parse checks
FULL_OPTIONS = Options(
    width=0.15,
    height=1.3,
    fit=True,
    rotate=90,
    flip_vertical=True,
    flip_horizontal=True,
    quality=80,
    signature="c0ffee",
    scale_up=True,
    format=ImageFormat.PNG,
    crop_x=100,
    crop_y=-200,
    crop_width=0.5,
    crop_height=400,
    smart_crop=True,
)

SOURCES_DOCUMENT = {
    "/a/": {"base_url": "", "default_options": {}},
    "/a/b/": {"base_url": "https://b.example.com/", "default_options": {"quality": 70}},
    "/cdn/": {
        "base_url": "https://cdn.example.com/images/",
        "default_options": {"width": 300, "format": "jpeg"},
    },
}


def make_registry() -> SourceRegistry:
    return SourceRegistry({
        "/a/": SourceConfiguration(),
        "/a/b/": SourceConfiguration(
            base_url=urlsplit("https://b.example.com/"),
            default_options=Options(quality=70),
        ),
        "/cdn/": SourceConfiguration(
            base_url=urlsplit("https://cdn.example.com/images/"),
            default_options=Options(width=300, format=ImageFormat.JPEG),
        ),
    })


@pytest.fixture
def registry() -> SourceRegistry:
    return make_registry()


@pytest.fixture
def empty_registry() -> SourceRegistry:
    return SourceRegistry()


@pytest.fixture
def installed_registry():
    """Install the sample registry as the process-wide snapshot for one test."""
    previous = set_registry(make_registry())
    yield get_registry()
    set_registry(previous)
