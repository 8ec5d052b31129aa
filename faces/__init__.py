"""Watch faces and the shared clock/style model they render from."""
from typing import Dict, Optional, Type

from core.settings.settings_manager import SettingsManager
from faces.analog_face import AnalogFace
from faces.base_face import WatchFace
from faces.digital_face import DigitalFace

FACE_TYPES: Dict[str, Type[WatchFace]] = {
    AnalogFace.NAME: AnalogFace,
    DigitalFace.NAME: DigitalFace,
}


def create_face(name: str, settings: Optional[SettingsManager] = None,
                timezone: Optional[str] = None) -> WatchFace:
    """Instantiate a face by name ('analog' or 'digital')."""
    key = str(name).strip().lower()
    try:
        face_type = FACE_TYPES[key]
    except KeyError:
        raise ValueError(f"Unknown watch face '{name}' (expected one of {sorted(FACE_TYPES)})") from None
    return face_type(settings, timezone=timezone)


__all__ = ['AnalogFace', 'DigitalFace', 'WatchFace', 'FACE_TYPES', 'create_face']
