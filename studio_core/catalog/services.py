"""Studio service catalog: which equipment categories each service depends on."""

import logging
from typing import Iterable, Optional

from studio_core.utils import unique

logger = logging.getLogger(__name__)

SERVICE_EQUIPMENT_MAP: dict[str, dict[str, list[str]]] = {
    "recording": {
        "required": ["microphone", "audio_interface", "headphones"],
        "optional": ["preamp", "compressor", "reverb_unit"],
    },
    "mixing": {
        "required": ["studio_monitors", "audio_interface", "mixing_software"],
        "optional": ["analog_console", "outboard_gear"],
    },
    "mastering": {
        "required": ["reference_monitors", "mastering_software", "audio_interface"],
        "optional": ["mastering_console", "analog_processors"],
    },
    "production": {
        "required": ["daw_software", "midi_controller", "studio_monitors"],
        "optional": ["synthesizers", "drum_machines", "samplers"],
    },
    "video": {
        "required": ["cameras", "lighting_kit", "audio_recorder"],
        "optional": ["tripods", "additional_lights", "green_screen"],
    },
}

SERVICE_ALIASES: dict[str, str] = {
    "tracking": "recording", "vocals": "recording", "voice over": "recording",
    "voiceover": "recording", "podcast": "recording",
    "mix": "mixing", "mixdown": "mixing",
    "master": "mastering",
    "beat making": "production", "beats": "production", "producing": "production",
    "music video": "video", "filming": "video", "shoot": "video",
}


def match_service_category(query: str) -> Optional[str]:
    """Match a service name or category to a catalog key. Returns None if no match."""
    normalized = query.lower().strip()
    if not normalized:
        return None
    if normalized in SERVICE_EQUIPMENT_MAP:
        return normalized
    for alias, category in SERVICE_ALIASES.items():
        if alias in normalized:
            return category
    for category in SERVICE_EQUIPMENT_MAP:
        if category in normalized:
            return category
    return None


def get_required_categories(service_categories: Iterable[str]) -> list[str]:
    """Union of required equipment categories, in first-seen order.

    Unknown services contribute nothing.
    """
    required: list[str] = []
    for service in service_categories:
        key = match_service_category(service)
        if key is None:
            logger.debug("No equipment mapping for service '%s'", service)
            continue
        required.extend(SERVICE_EQUIPMENT_MAP[key]["required"])
    return unique(required)


def get_optional_categories(service_categories: Iterable[str]) -> list[str]:
    """Union of optional equipment categories not already required."""
    service_categories = list(service_categories)
    required = set(get_required_categories(service_categories))
    optional: list[str] = []
    for service in service_categories:
        key = match_service_category(service)
        if key is not None:
            optional.extend(SERVICE_EQUIPMENT_MAP[key]["optional"])
    return [c for c in unique(optional) if c not in required]
