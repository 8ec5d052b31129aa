"""Tests for the shared WatchFace lifecycle and the face registry."""
import pytest

from faces import FACE_TYPES, create_face
from faces.analog_face import AnalogFace
from faces.digital_face import DigitalFace
from faces.geometry import ViewportGeometry
from faces.styles import DeviceProperties, DisplayMode


class TestRegistry:

    def test_known_faces(self):
        assert FACE_TYPES == {"analog": AnalogFace, "digital": DigitalFace}

    def test_create_is_case_insensitive(self):
        assert isinstance(create_face("Digital"), DigitalFace)
        assert isinstance(create_face(" analog "), AnalogFace)

    def test_unknown_face(self):
        with pytest.raises(ValueError, match="Unknown watch face"):
            create_face("sundial")


class TestLifecycle:

    def test_starts_interactive(self):
        face = AnalogFace()
        assert face.mode is DisplayMode.INTERACTIVE
        assert face.is_ambient is False
        assert face.geometry is None
        assert face.properties == DeviceProperties()

    def test_mode_change_reports_transitions(self, utc_analog_face):
        assert utc_analog_face.on_mode_changed(DisplayMode.INTERACTIVE) is False
        assert utc_analog_face.on_mode_changed(DisplayMode.AMBIENT) is True
        assert utc_analog_face.on_mode_changed(True) is False
        assert utc_analog_face.on_mode_changed(False) is True
        assert utc_analog_face.active_styles is utc_analog_face.base_styles

    def test_ambient_keeps_base_styles(self, utc_analog_face):
        base = utc_analog_face.base_styles
        utc_analog_face.on_mode_changed(True)
        assert utc_analog_face.base_styles is base
        assert utc_analog_face.active_styles is not base
        assert utc_analog_face.active_styles["hand"].color == (255, 255, 255, 255)
        # Background keeps its theme colour; rendering paints black in ambient.
        assert utc_analog_face.active_styles["background"].color == base["background"].color

    def test_properties_drop_anti_alias_in_ambient(self, utc_analog_face):
        utc_analog_face.on_properties_changed({"low_bit_ambient": True})
        assert utc_analog_face.properties.low_bit_ambient is True
        # Interactive styles are unaffected.
        assert utc_analog_face.active_styles["tick"].anti_alias is True
        utc_analog_face.on_mode_changed(True)
        assert utc_analog_face.active_styles["tick"].anti_alias is False

    def test_malformed_properties(self, utc_analog_face):
        utc_analog_face.on_properties_changed({"burn_in_protection": "sometimes"})
        assert utc_analog_face.properties == DeviceProperties()

    def test_viewport_change(self, utc_analog_face):
        assert utc_analog_face.on_viewport_change(200, 100) == ViewportGeometry(200, 100)
        assert utc_analog_face.geometry.center == (100.0, 50.0)

    def test_empty_viewport_ignored(self, utc_analog_face):
        assert utc_analog_face.on_viewport_change(0, 480) == ViewportGeometry(320, 320)
        assert utc_analog_face.on_viewport_change(-5, -5) == ViewportGeometry(320, 320)

    def test_visibility(self, utc_analog_face):
        utc_analog_face.on_visibility_changed(True)
        assert utc_analog_face.visible is True
        utc_analog_face.on_visibility_changed(False)
        assert utc_analog_face.visible is False


class TestTimezone:

    def test_explicit_timezone(self):
        assert AnalogFace(timezone="Asia/Tokyo").timezone == "Asia/Tokyo"

    def test_defaults_to_setting(self, settings_manager):
        settings_manager.set("display.timezone", "UTC+5:30")
        assert DigitalFace(settings_manager).timezone == "UTC+5:30"

    def test_invalid_normalised_to_local(self, caplog):
        face = AnalogFace(timezone="Not/AZone")
        assert face.timezone == "local"
        assert "[FALLBACK]" in caplog.text

    def test_timezone_change(self, utc_analog_face):
        utc_analog_face.on_timezone_changed("Europe/Paris")
        assert utc_analog_face.timezone == "Europe/Paris"
        utc_analog_face.on_timezone_changed(None)
        assert utc_analog_face.timezone == "local"
