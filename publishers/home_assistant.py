"""
Home Assistant MQTT discovery payloads.

Each payload describes one sensor (or image) entity, the keys of the
returned mappings are the discovery config topics.
"""

from schemas import ThemeInfo
from utils import const
from utils.helpers import clean_theme_name


def device_info(name: str, identifier: str, version: str) -> dict:
    return {
        "name": name,
        "sw_version": version,
        "model": const.DEVICE_MODEL,
        "identifiers": [identifier],
        "manufacturer": const.DEVICE_MANUFACTURER,
    }


def sensor_configs(root: str, discovery_prefix: str, version: str) -> dict[str, dict]:
    """Discovery payloads for the sensors over all changesets."""
    device = device_info("MapComplete", "mapcomplete", version)
    sensor_topic = f"{discovery_prefix}/sensor/mapcomplete"

    return {
        f"{sensor_topic}/totalChangesets/config": {
            "name": "Changesets Today",
            "unit_of_measurement": "changesets",
            "state_topic": f"{root}/changesets/total",
            "icon": "mdi:map-marker",
            "unique_id": "mapcomplete_changesets_total",
            "json_attributes_topic": f"{root}/changesets",
            "device": device,
        },
        f"{sensor_topic}/lastChangeset/config": {
            "name": "Last Changeset",
            "state_topic": f"{root}/changesets/last",
            "icon": "mdi:map-marker",
            "unique_id": "mapcomplete_changesets_last",
            "enabled_by_default": False,
            "device": device,
        },
        f"{sensor_topic}/lastChangesetColor/config": {
            "name": "Last Changeset Color",
            "state_topic": root,
            "icon": "mdi:palette",
            "unique_id": "mapcomplete_changesets_last_color",
            "enabled_by_default": False,
            "value_template": "{{ value_json.changesets.lastColor }}",
            "device": device,
        },
        f"{sensor_topic}/lastChangesetColorRgb/config": {
            "name": "Last Changeset Color RGB",
            "state_topic": root,
            "icon": "mdi:palette",
            "unique_id": "mapcomplete_changesets_last_color_rgb",
            "enabled_by_default": False,
            "value_template": "{{ value_json.changesets.lastColorRgb }}",
            "device": device,
        },
        f"{sensor_topic}/totalUsers/config": {
            "name": "Users Today",
            "unit_of_measurement": "users",
            "state_topic": f"{root}/users/total",
            "icon": "mdi:account",
            "unique_id": "mapcomplete_users_total",
            "json_attributes_topic": f"{root}/users/users",
            "device": device,
        },
        f"{sensor_topic}/lastUser/config": {
            "name": "Last User",
            "state_topic": root,
            "icon": "mdi:account",
            "unique_id": "mapcomplete_users_last",
            "value_template": "{{ value_json.users.last }}",
            "device": device,
        },
        f"{sensor_topic}/topUser/config": {
            "name": "Top User(s)",
            "state_topic": root,
            "icon": "mdi:account",
            "unique_id": "mapcomplete_users_top",
            "value_template": "{{ value_json.users.top }}",
            "device": device,
        },
        f"{sensor_topic}/totalThemes/config": {
            "name": "Themes Used Today",
            "unit_of_measurement": "themes",
            "state_topic": f"{root}/themes/total",
            "icon": "mdi:palette",
            "unique_id": "mapcomplete_themes_total",
            "json_attributes_topic": f"{root}/themes/themes",
            "device": device,
        },
        f"{sensor_topic}/lastTheme/config": {
            "name": "Last Theme",
            "state_topic": root,
            "icon": "mdi:palette",
            "unique_id": "mapcomplete_themes_last",
            "value_template": "{{ value_json.themes.last }}",
            "device": device,
        },
        f"{sensor_topic}/topTheme/config": {
            "name": "Top Theme(s)",
            "state_topic": root,
            "icon": "mdi:palette",
            "unique_id": "mapcomplete_themes_top",
            "value_template": "{{ value_json.themes.top }}",
            "device": device,
        },
        f"{sensor_topic}/totalQuestions/config": {
            "name": "Questions Answered Today",
            "unit_of_measurement": "questions",
            "state_topic": f"{root}/questions",
            "icon": "mdi:comment-question",
            "unique_id": "mapcomplete_questions_total",
            "device": device,
        },
        f"{sensor_topic}/totalImages/config": {
            "name": "Images Added Today",
            "unit_of_measurement": "images",
            "state_topic": f"{root}/images",
            "icon": "mdi:image",
            "unique_id": "mapcomplete_images_total",
            "device": device,
        },
        f"{sensor_topic}/totalPoints/config": {
            "name": "Points Added Today",
            "unit_of_measurement": "points",
            "state_topic": f"{root}/points",
            "icon": "mdi:map-marker",
            "unique_id": "mapcomplete_points_total",
            "device": device,
        },
    }


def theme_sensor_configs(
    theme: ThemeInfo, root: str, discovery_prefix: str, version: str
) -> dict[str, dict]:
    """Discovery payloads for the sensors of a single theme."""
    theme_id = clean_theme_name(theme.id)
    prefix = f"mapcomplete_theme_{theme_id}"
    device = device_info(theme.title, prefix, version)
    theme_topic = f"{root}/theme/{theme_id}"

    def config_topic(component: str, metric: str) -> str:
        return f"{discovery_prefix}/{component}/mapcomplete/theme_{theme_id}_{metric}/config"

    return {
        config_topic("sensor", "changesets"): {
            "name": "Changesets Today",
            "state_topic": f"{theme_topic}/changesets/total",
            "entity_picture": theme.icon_url,
            "icon": "mdi:map-marker",
            "unit_of_measurement": "changesets",
            "unique_id": f"{prefix}_changesets",
            "device": device,
        },
        config_topic("image", "icon"): {
            "name": "Icon",
            "url_topic": f"{theme_topic}/icon",
            "entity_picture": theme.icon_url,
            "unique_id": f"{prefix}_icon",
            "device": device,
        },
        config_topic("sensor", "users"): {
            "name": "Users Today",
            "state_topic": f"{theme_topic}/users/total",
            "icon": "mdi:account",
            "unit_of_measurement": "users",
            "unique_id": f"{prefix}_users",
            "device": device,
        },
        config_topic("sensor", "last_user"): {
            "name": "Last User",
            "state_topic": theme_topic,
            "icon": "mdi:account",
            "unique_id": f"{prefix}_last_user",
            "value_template": "{{ value_json.users.last }}",
            "device": device,
        },
        config_topic("sensor", "top_user"): {
            "name": "Top User(s)",
            "state_topic": theme_topic,
            "icon": "mdi:account",
            "unique_id": f"{prefix}_top_user",
            "value_template": "{{ value_json.users.top }}",
            "device": device,
        },
        config_topic("sensor", "questions"): {
            "name": "Questions Answered",
            "state_topic": f"{theme_topic}/questions",
            "icon": "mdi:comment-question",
            "unique_id": f"{prefix}_questions",
            "device": device,
        },
        config_topic("sensor", "images"): {
            "name": "Images Added",
            "state_topic": f"{theme_topic}/images",
            "icon": "mdi:image",
            "unique_id": f"{prefix}_images",
            "device": device,
        },
        config_topic("sensor", "points"): {
            "name": "Points Added",
            "state_topic": f"{theme_topic}/points",
            "icon": "mdi:map-marker",
            "unique_id": f"{prefix}_points",
            "device": device,
        },
    }
