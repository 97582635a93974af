THEME_COLORS = {
    "default": "#70c549",
    "advertising": "#fffe73",
    "aed": "#008855",
    "benches": "#896847",
    "cycle_infra": "#f7d728",
    "cyclofix": "#e2783d",
    "drinking_water": "#66bef3",
    "grb": "#ffe615",
    "maxspeed": "#e41408",
    "natuurpunt": "#93bb0f",
    "onwheels": "#22ca60",
    "personal": "#37d649",
    "postboxes": "#ff6242",
    "toerisme_vlaanderen": "#038003",
    "trees": "#008000",
}

DEFAULT_COLOR = THEME_COLORS["default"]

DEFAULT_ICON_URL = "https://raw.githubusercontent.com/pietervdvn/MapComplete/refs/heads/develop/assets/svg/add.svg"

MAPCOMPLETE_RAW_BASE_URL = "https://raw.githubusercontent.com/pietervdvn/MapComplete"

OFFICIAL_HOSTS = (
    "https://mapcomplete.osm.be/",
    "https://mapcomplete.org/",
)

DEVELOPMENT_HOST = "https://pietervdvn.github.io/mc/"

OSM_CHANGESET_URL = "https://osm.org/changeset/{}"

OSMCHA_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Metadata counters summed into the daily statistics
METADATA_COUNTERS = {
    "questions": "answer",
    "images": "add-image",
    "points": "create",
}

UA_HEADER = {
    "User-Agent": "MapComplete-MQTT",
}

JSON_HEADERS = {
    "accept": "application/json",
}

DEVICE_MODEL = "MapComplete Statistics"
DEVICE_MANUFACTURER = "MapComplete MQTT"
