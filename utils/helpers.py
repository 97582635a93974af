from collections import Counter
from typing import Iterable, Optional


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert a `#rrggbb` color string to an (r, g, b) tuple."""
    value = int(hex_color.lstrip("#"), 16)
    return (value >> 16) & 255, (value >> 8) & 255, value & 255


def rgb_to_hex(rgb: Iterable[float]) -> str:
    r, g, b = (max(0, min(255, round(channel))) for channel in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def count_sorted(values: Iterable[str]) -> dict[str, int]:
    """
    Count the occurrences of each value, sorted by count descending.
    Ties keep the order in which the values were first seen.
    """
    counts = Counter(values)
    return dict(sorted(counts.items(), key=lambda item: item[1], reverse=True))


def find_top(counts: dict[str, int]) -> Optional[str]:
    """
    Return the key with the highest count. When several keys share the
    highest count, all of them are returned joined by ", ".
    """
    if not counts:
        return None
    highest = max(counts.values())
    return ", ".join(key for key, count in counts.items() if count == highest)


def parse_counter(value) -> int:
    # Changeset tags are free text, anything that isn't an integer counts as 0
    if value is None:
        return 0
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


def clean_theme_name(name: str) -> str:
    """Make a theme id usable in MQTT topics and Home Assistant unique ids."""
    return name.replace("/", "_")
