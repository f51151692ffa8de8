"""
Unit Tests for core models

Tests for EventsSection, ClassifiedLine accessors and ImageReference paths.
"""

import pytest

from storyboard_toolkit.core.models import (
    ClassifiedLine,
    EventsSection,
    ImageReference,
    LineKind,
    frame_path,
    normalize_image_path,
)


class TestEventsSection:
    """Tests for EventsSection dataclass."""

    def test_init_when_valid_range_then_creates_section(self):
        section = EventsSection(start=2, end=5)
        assert len(section) == 3
        assert list(section.indices()) == [2, 3, 4]
        assert not section.is_empty

    def test_empty_when_called_then_zero_range(self):
        section = EventsSection.empty()
        assert section == EventsSection(0, 0)
        assert section.is_empty
        assert list(section.indices()) == []

    def test_init_when_negative_start_then_raises_error(self):
        with pytest.raises(ValueError, match="start must be >= 0"):
            EventsSection(start=-1, end=2)

    def test_init_when_end_before_start_then_raises_error(self):
        with pytest.raises(ValueError, match="end must be >= start"):
            EventsSection(start=4, end=3)


class TestClassifiedLine:
    """Tests for ClassifiedLine field accessors."""

    def test_sprite_accessors_when_full_line_then_reads_positions(self):
        raw = 'Sprite,Background,TopLeft,"sb/bg.png",10,100'
        line = ClassifiedLine(raw, LineKind.OBJECT, tuple(raw.split(",")))

        assert line.object_type == "Sprite"
        assert line.anchor == "TopLeft"
        assert line.path == "sb/bg.png"
        assert line.x == "10"
        assert line.y == "100"
        assert line.frame_count is None
        assert line.frame_delay is None

    def test_animation_accessors_when_full_line_then_reads_frames(self):
        raw = 'Animation,0,Centre,"sb/fx.png",0,300,4,120,LoopForever'
        line = ClassifiedLine(raw, LineKind.OBJECT, tuple(raw.split(",")))

        assert line.is_animation
        assert line.frame_count == "4"
        assert line.frame_delay == "120"

    def test_accessors_when_short_line_then_none(self):
        line = ClassifiedLine("Sprite,0", LineKind.OBJECT, ("Sprite", "0"))
        assert line.anchor is None
        assert line.path is None
        assert line.y is None

    def test_accessors_when_other_line_then_none(self):
        line = ClassifiedLine("[Events]", LineKind.OTHER)
        assert line.object_type is None
        assert line.path is None
        assert line.field(0) is None


class TestPaths:
    """Tests for path normalization and frame paths."""

    @pytest.mark.parametrize("raw, expected", [
        ('"sb/bg.png"', "sb/bg.png"),
        ("sb\\bg.png", "sb/bg.png"),
        ('"sb\\\\light\\\\glow.png"', "sb/light/glow.png"),
        ("bg.png", "bg.png"),
    ])
    def test_normalize_image_path(self, raw, expected):
        assert normalize_image_path(raw) == expected

    def test_frame_path_when_extension_then_index_before_extension(self):
        assert frame_path("sb/fx.png", 2) == "sb/fx2.png"

    def test_frame_path_when_no_extension_then_unchanged(self):
        assert frame_path("sb/fx", 2) == "sb/fx"

    def test_frame_path_when_dotted_name_then_only_last_extension(self):
        assert frame_path("sb/my.fx.jpg", 0) == "sb/my.fx0.jpg"

    def test_image_reference_path_when_sprite_then_source_path(self):
        assert ImageReference("sb/bg.png").path == "sb/bg.png"

    def test_image_reference_path_when_frame_then_frame_path(self):
        assert ImageReference("sb/fx.png", 3).path == "sb/fx3.png"

    def test_image_reference_is_hashable(self):
        refs = {ImageReference("a.png"), ImageReference("a.png"), ImageReference("a.png", 0)}
        assert len(refs) == 2
