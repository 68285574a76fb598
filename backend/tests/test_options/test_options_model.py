"""Tests for the Options model and its canonical encoding."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from imageproxy.models.options import ImageFormat, Options, format_number
from tests.conftest import EMPTY_OPTIONS, FULL_OPTIONS


class TestEncode:
    def test_empty(self):
        assert EMPTY_OPTIONS.encode() == "0x0"

    def test_flags_and_numbers(self):
        opts = Options(width=1, height=2, fit=True, rotate=90, flip_vertical=True, flip_horizontal=True, quality=80)
        assert opts.encode() == "1x2,fit,r90,fv,fh,q80"

    def test_signature_and_format(self):
        opts = Options(width=0.15, height=1.3, rotate=45, quality=95, signature="c0ffee", format=ImageFormat.PNG)
        assert opts.encode() == "0.15x1.3,r45,q95,sc0ffee,png"

    def test_partial_crop(self):
        opts = Options(width=0.15, height=1.3, rotate=45, quality=95, signature="c0ffee", crop_x=100, crop_y=200)
        assert opts.encode() == "0.15x1.3,r45,q95,sc0ffee,cx100,cy200"

    def test_full_crop(self):
        opts = Options(
            width=0.15, height=1.3, rotate=45, quality=95, signature="c0ffee",
            format=ImageFormat.PNG, crop_x=100, crop_y=200, crop_width=300, crop_height=400,
        )
        assert opts.encode() == "0.15x1.3,r45,q95,sc0ffee,png,cx100,cy200,cw300,ch400"

    def test_every_field(self):
        assert FULL_OPTIONS.encode() == (
            "0.15x1.3,fit,r90,fv,fh,q80,sc0ffee,scaleUp,png,cx100,cy-200,cw0.5,ch400,sc"
        )

    def test_independent_of_construction_order(self):
        a = Options(smart_crop=True, width=10, quality=5)
        b = Options(quality=5, width=10).merged(smart_crop=True)
        assert a.encode() == b.encode() == "10x0,q5,sc"

    def test_str_is_encoding(self):
        assert str(FULL_OPTIONS) == FULL_OPTIONS.encode()


class TestFormatNumber:
    def test_integral_values_have_no_fraction(self):
        assert format_number(100.0) == "100"
        assert format_number(-200.0) == "-200"
        assert format_number(123456.0) == "123456"

    def test_fractions(self):
        assert format_number(0.15) == "0.15"
        assert format_number(1.3) == "1.3"
        assert format_number(0.0001) == "0.0001"

    def test_exponent_form(self):
        assert format_number(1e6) == "1e+06"
        assert format_number(1234567.0) == "1.234567e+06"
        assert format_number(0.00001) == "1e-05"

    def test_zero(self):
        assert format_number(0.0) == "0"
        assert format_number(-0.0) == "-0"


class TestValueSemantics:
    def test_frozen(self):
        opts = Options(width=10)
        with pytest.raises(ValidationError):
            opts.width = 20

    def test_merged_returns_independent_copy(self):
        defaults = Options(width=10, quality=80)
        merged = defaults.merged(width=20)
        assert merged.width == 20
        assert merged.quality == 80
        assert defaults.width == 10

    def test_merged_without_fields_is_same_value(self):
        assert FULL_OPTIONS.merged() == FULL_OPTIONS

    def test_rejects_non_finite(self):
        with pytest.raises(ValidationError):
            Options(width=float("nan"))
        with pytest.raises(ValidationError):
            Options(crop_x=float("inf"))

    def test_json_field_names(self):
        opts = Options.model_validate({"flip_vertical": True, "scale_up": True, "format": "tiff", "crop_width": 5})
        assert opts.flip_vertical
        assert opts.scale_up
        assert opts.format is ImageFormat.TIFF
        assert opts.crop_width == 5.0

    def test_unknown_fields_ignored(self):
        assert Options.model_validate({"bogus": 1}) == EMPTY_OPTIONS


class TestHasTransform:
    def test_empty(self):
        assert not EMPTY_OPTIONS.has_transform

    def test_qualifiers_alone_do_not_transform(self):
        assert not Options(fit=True, signature="abc", scale_up=True, smart_crop=True).has_transform

    def test_transforming_fields(self):
        for opts in (
            Options(width=1),
            Options(height=0.5),
            Options(rotate=90),
            Options(flip_vertical=True),
            Options(flip_horizontal=True),
            Options(quality=50),
            Options(format=ImageFormat.JPEG),
            Options(crop_x=-10),
            Options(crop_height=10),
        ):
            assert opts.has_transform, opts


class TestImageFormat:
    def test_from_token(self):
        assert ImageFormat.from_token("jpeg") is ImageFormat.JPEG
        assert ImageFormat.from_token("png") is ImageFormat.PNG
        assert ImageFormat.from_token("tiff") is ImageFormat.TIFF

    def test_unknown_tokens(self):
        assert ImageFormat.from_token("") is None
        assert ImageFormat.from_token("gif") is None
        assert ImageFormat.from_token("JPEG") is None
