"""Application settings loaded from .env via pydantic-settings.

``Settings`` is what the service reads from its environment.
``MusicConfig`` is the object the widget itself consumes; it uses the
camelCase keys a host page injects (``metingApi``, ``pageSize``, …) so a
host-provided dict validates directly.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings

DEFAULT_METING_API = "https://api.injahow.cn/meting/"
DEFAULT_METING_ID = "2619366284"


class MetingConfig(BaseModel):
    """Query selectors identifying the remote playlist."""

    api: str = DEFAULT_METING_API
    server: str = "netease"
    type: str = "playlist"
    id: str = DEFAULT_METING_ID

    @property
    def playlist_id(self) -> int:
        """Numeric form of ``id`` (0 when the id is not numeric)."""
        try:
            return int(self.id)
        except ValueError:
            return 0


class MusicConfig(BaseModel):
    """Widget configuration, keyed the way the host page injects it."""

    meting_api: MetingConfig = Field(default_factory=MetingConfig)
    page_size: int = Field(default=60, ge=1)
    enable_keyboard_shortcuts: bool = True
    enable_auto_play: bool = False
    enable_shuffle: bool = True
    enable_repeat: bool = False
    default_volume: float = Field(default=0.7, ge=0.0, le=1.0)
    preload_pages: int = Field(default=10, ge=0)

    # Presentation only
    border_radius: str = "16px"
    mini_width: int = 280
    expanded_width: int = 360
    expanded_height: int = 600
    layout: Literal["left", "right"] = "right"

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class Settings(BaseSettings):
    """Central configuration — values come from environment / .env file."""

    # Aggregator
    meting_api: str = DEFAULT_METING_API
    meting_server: str = "netease"
    meting_type: str = "playlist"
    meting_id: str = DEFAULT_METING_ID

    # Widget
    page_size: int = 60
    enable_keyboard_shortcuts: bool = True
    enable_auto_play: bool = False
    enable_shuffle: bool = True
    enable_repeat: bool = False
    default_volume: float = 0.7
    preload_pages: int = 10
    border_radius: str = "16px"
    mini_width: int = 280
    expanded_width: int = 360
    expanded_height: int = 600
    layout: Literal["left", "right"] = "right"

    # Acquisition
    request_timeout: float = 15.0  # seconds, hard deadline per request
    fetch_retries: int = 2
    metadata_timeout: float = 10.0

    # App
    enable: bool = True
    dist_dir: str = "./dist"
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def dist_abs_path(self) -> Path:
        """Return the built-assets directory as an absolute Path."""
        return Path(self.dist_dir).resolve()

    def music_config(self) -> MusicConfig:
        """Build the widget-facing configuration from these settings."""
        return MusicConfig(
            meting_api=MetingConfig(
                api=self.meting_api,
                server=self.meting_server,
                type=self.meting_type,
                id=self.meting_id,
            ),
            page_size=self.page_size,
            enable_keyboard_shortcuts=self.enable_keyboard_shortcuts,
            enable_auto_play=self.enable_auto_play,
            enable_shuffle=self.enable_shuffle,
            enable_repeat=self.enable_repeat,
            default_volume=self.default_volume,
            preload_pages=self.preload_pages,
            border_radius=self.border_radius,
            mini_width=self.mini_width,
            expanded_width=self.expanded_width,
            expanded_height=self.expanded_height,
            layout=self.layout,
        )


@lru_cache
def get_settings() -> Settings:
    """Cached so .env is read only once."""
    return Settings()
