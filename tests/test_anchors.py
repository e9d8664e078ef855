"""Tests for anchor naming and the anchor registry."""

import pytest

from abi_docs.anchors import AnchorRegistry, anchor_name, anchor_tag, to_snake_case


class TestSnakeCase:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Point", "point"),
            ("point", "point"),
            ("my-record", "my_record"),
            ("MyRecord", "my_record"),
            ("my_record", "my_record"),
            ("HTTPServer", "http_server"),
            ("u8Field", "u8_field"),
            ("Vec3", "vec3"),
            ("  spaced name ", "spaced_name"),
            ("getURL", "get_url"),
            ("Été", "été"),
            ("größe", "größe"),
            ("GrößeMax", "größe_max"),
        ],
    )
    def test_to_snake_case(self, name, expected):
        assert to_snake_case(name) == expected


class TestAnchorName:
    def test_type_anchor(self):
        assert anchor_name("Point") == "point"

    def test_member_anchor(self):
        assert anchor_name("Point", "x") == "point.x"
        assert anchor_name("file-stat", "accessTime") == "file_stat.access_time"

    def test_non_ascii_letters_are_kept(self):
        assert anchor_name("Größe", "Été") == "größe.été"

    def test_anchor_tag(self):
        assert anchor_tag("point.x") == '<a href="#point.x" name="point.x"></a>'


class TestAnchorRegistry:
    def test_register_type(self):
        registry = AnchorRegistry()
        anchor = registry.register("Point")

        assert anchor == "point"
        assert registry["Point"] == "#point"

    def test_register_member(self):
        registry = AnchorRegistry()
        registry.register("Point", "x")

        assert "Point::x" in registry
        assert registry["Point::x"] == "#point.x"

    def test_preserves_insertion_order(self):
        registry = AnchorRegistry()
        registry.register("B")
        registry.register("A")
        registry.register("B", "m")

        assert list(registry) == ["B", "A", "B::m"]
        assert len(registry) == 3

    def test_to_dict_is_a_copy(self):
        registry = AnchorRegistry()
        registry.register("Point")
        hrefs = registry.to_dict()
        hrefs["Other"] = "#other"

        assert "Other" not in registry
