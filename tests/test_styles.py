"""Tests for paint styles, display modes and ambient style selection."""
import pytest
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont

from faces.styles import (
    WHITE,
    DeviceProperties,
    DisplayMode,
    PaintStyle,
    StyleSet,
    resolve_typeface,
    select_styles,
)

TEAL = (0, 150, 136, 255)


@pytest.fixture
def base_styles():
    return StyleSet({
        "background": PaintStyle(color=(38, 50, 56, 255)),
        "hand": PaintStyle(color=TEAL, stroke_width=3.0, square_cap=True),
        "text": PaintStyle(color=TEAL, text_size=40.0),
    })


class TestDisplayMode:

    def test_from_ambient(self):
        assert DisplayMode.from_ambient(True) is DisplayMode.AMBIENT
        assert DisplayMode.from_ambient(False) is DisplayMode.INTERACTIVE


class TestDeviceProperties:

    def test_defaults_when_missing(self):
        assert DeviceProperties.from_mapping(None) == DeviceProperties()
        assert DeviceProperties.from_mapping({}) == DeviceProperties()

    def test_reads_flags(self):
        props = DeviceProperties.from_mapping({"low_bit_ambient": True, "burn_in_protection": "true"})
        assert props.low_bit_ambient is True
        assert props.burn_in_protection is True
        assert props.reduced_fidelity is True

    def test_malformed_flags_read_false(self):
        props = DeviceProperties.from_mapping({"low_bit_ambient": "maybe", "burn_in_protection": object()})
        assert props == DeviceProperties(False, False)
        assert props.reduced_fidelity is False


class TestStyleSet:

    def test_mapping_access(self, base_styles):
        assert len(base_styles) == 3
        assert "hand" in base_styles
        assert base_styles.roles() == ("background", "hand", "text")
        assert base_styles["hand"].stroke_width == 3.0

    def test_is_read_only(self, base_styles):
        with pytest.raises(TypeError):
            base_styles._entries["hand"] = PaintStyle()  # type: ignore[index]

    def test_map_returns_copy(self, base_styles):
        changed = base_styles.map(lambda role, style: PaintStyle(color=WHITE) if role == "hand" else style)
        assert changed["hand"].color == WHITE
        assert base_styles["hand"].color == TEAL


class TestSelectStyles:

    def test_interactive_returns_base(self, base_styles):
        assert select_styles(base_styles, DisplayMode.INTERACTIVE, DeviceProperties(True, True)) is base_styles

    def test_ambient_recolours_ink_roles_only(self, base_styles):
        ambient = select_styles(base_styles, DisplayMode.AMBIENT, DeviceProperties(),
                                ink_roles=("hand", "text"))
        assert ambient["hand"].color == WHITE
        assert ambient["text"].color == WHITE
        assert ambient["background"].color == base_styles["background"].color
        # Full fidelity devices keep anti-aliasing.
        assert all(ambient[role].anti_alias for role in ambient)
        # Base set untouched.
        assert base_styles["hand"].color == TEAL

    def test_ambient_without_roles_recolours_everything(self, base_styles):
        ambient = select_styles(base_styles, DisplayMode.AMBIENT, DeviceProperties(),
                                ambient_ink=(200, 200, 200, 255))
        assert {ambient[role].color for role in ambient} == {(200, 200, 200, 255)}

    @pytest.mark.parametrize("props", [
        DeviceProperties(low_bit_ambient=True),
        DeviceProperties(burn_in_protection=True),
    ])
    def test_reduced_fidelity_drops_anti_alias(self, base_styles, props):
        ambient = select_styles(base_styles, DisplayMode.AMBIENT, props)
        assert not any(ambient[role].anti_alias for role in ambient)
        assert all(base_styles[role].anti_alias for role in base_styles)


class TestPaintStyle:

    def test_pen(self, qt_app):
        pen = PaintStyle(color=TEAL, stroke_width=3.0, square_cap=True).pen()
        assert pen.widthF() == pytest.approx(3.0)
        assert pen.capStyle() == Qt.PenCapStyle.SquareCap
        assert pen.color().green() == 150

    def test_font_size_and_antialias(self, qt_app):
        font = PaintStyle(text_size=20.0, anti_alias=False).font()
        assert font.pixelSize() == 20
        assert font.styleStrategy() == QFont.StyleStrategy.NoAntialias


class TestResolveTypeface:

    def test_family_without_path(self):
        assert resolve_typeface("Nexa Light") == "Nexa Light"
        assert resolve_typeface("") is None

    def test_missing_font_file_falls_back(self, qt_app, tmp_path, caplog):
        missing = str(tmp_path / "missing.ttf")
        assert resolve_typeface("Roboto Medium", missing) == "Roboto Medium"
        assert "[FALLBACK]" in caplog.text
