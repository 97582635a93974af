from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Core Application Settings
    version: str = "1.0.0"
    logging_level: str = "INFO"
    log_file: str = "mapcomplete-stats.log"
    debug: bool = False
    dry_run: bool = False
    dry_run_output: str = "mqttData.json"

    # MQTT Broker Settings
    mqtt_host: str = "localhost"
    mqtt_port: int = 1883
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    mqtt_topic_root: str = "mapcomplete/statistics"
    discovery_prefix: str = "homeassistant"

    # OSMCha Settings
    osmcha_token: str | None = None
    osmcha_url: str = "https://osmcha.org/api/v1/changesets/"
    osmcha_editor: str = "MapComplete"
    osmcha_page_size: int = 100

    # Time-related Settings
    request_timeout: float = 30.0  # seconds
    image_processing_timeout: float = 30.0  # seconds
    update_interval: int = 300  # 5 minutes in seconds
    fetch_overlap: int = 600  # 10 minutes in seconds

    @model_validator(mode="after")
    def debug_logging_level(self) -> "Settings":
        if self.debug:
            self.logging_level = "DEBUG"
        return self

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
