import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="devshot", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    logs_dir: str = Field(default="logs", alias="LOGS_DIR")
    log_to_file: bool = Field(default=True, alias="LOG_TO_FILE")

    # ADB server / CLI
    adb_path: str = Field(default="adb", alias="ADB_PATH")
    adb_bindir: str | None = Field(default=None, alias="ADB_BINDIR")  # overrides adb_path when set
    adb_host: str = Field(default="127.0.0.1", alias="ADB_HOST")
    adb_port: int = Field(default=5037, alias="ADB_PORT")
    adb_timeout: int = Field(default=10, alias="ADB_TIMEOUT")

    # The server may still be assembling its first device list right after start-server
    device_list_timeout_s: float = Field(default=10.0, alias="DEVICE_LIST_TIMEOUT_S")
    device_list_poll_s: float = Field(default=0.1, alias="DEVICE_LIST_POLL_S")

    # Display
    scale: float = Field(default=1.0, alias="SCALE")
    placeholder_width: int = Field(default=320, alias="PLACEHOLDER_WIDTH")
    placeholder_height: int = Field(default=240, alias="PLACEHOLDER_HEIGHT")

    # Input relay
    relay_delay_s: float = Field(default=1.0, alias="RELAY_DELAY_S")
    swipe_duration_ms: int | None = Field(default=None, alias="SWIPE_DURATION_MS")

    # Saving
    save_dir: str | None = Field(default=None, alias="SAVE_DIR")

    @property
    def adb_executable(self) -> str:
        if self.adb_bindir:
            return os.path.join(self.adb_bindir, "adb")
        return self.adb_path


settings = Settings()
