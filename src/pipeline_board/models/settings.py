"""Board settings loaded from YAML with environment overrides."""

import os
from pathlib import Path
from typing import Optional

try:
    import yaml
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "PyYAML is required for settings loading. Run: poetry install"
    ) from e
from pydantic import BaseModel, Field

from pipeline_board.models.deal import STAGE_ORDER, Stage
from pipeline_board.models.viewer import Viewer

DEFAULT_VISIBLE_ROWS = 4
DEFAULT_POLL_INTERVAL = 30.0


class BoardSettings(BaseModel):
    """Connection, viewer and board layout settings."""

    api_url: str = "http://localhost:5000"
    token: Optional[str] = None

    user_id: Optional[str] = None
    role: str = "admin"

    stages: list[Stage] = Field(default_factory=lambda: list(STAGE_ORDER))
    visible_rows: int = Field(default=DEFAULT_VISIBLE_ROWS, ge=1)
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    scroll_settle_delay: float = Field(default=0.3, ge=0)
    reconcile_after_move: bool = True

    view_state_path: Optional[Path] = None

    @property
    def viewer(self) -> Viewer:
        return Viewer(user_id=self.user_id, role=self.role)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "BoardSettings":
        """Load settings from YAML. Supports nested (api/board/viewer) or flat structure."""
        data = yaml.safe_load(Path(path).read_text()) or {}
        api = data.get("api", {})
        board = data.get("board", {})
        viewer = data.get("viewer", {})

        def _get(key: str, nested: dict, top: dict, default=None):
            return nested.get(key, top.get(key, default))

        flat: dict = {}
        for key, section in (
            ("api_url", api),
            ("token", api),
            ("user_id", viewer),
            ("role", viewer),
            ("stages", board),
            ("visible_rows", board),
            ("poll_interval", board),
            ("scroll_settle_delay", board),
            ("reconcile_after_move", board),
            ("view_state_path", board),
        ):
            value = _get(key, section, data)
            if value is not None:
                flat[key] = value
        # api.url is accepted as a shorthand for api_url
        if "api_url" not in flat and api.get("url"):
            flat["api_url"] = api["url"]
        return cls.model_validate(flat)

    @classmethod
    def from_env(cls, base: Optional["BoardSettings"] = None) -> "BoardSettings":
        """Apply PIPELINE_BOARD_* environment overrides on top of base (or defaults)."""
        settings = base or cls()
        updates: dict = {}
        env_map = {
            "PIPELINE_BOARD_API_URL": "api_url",
            "PIPELINE_BOARD_TOKEN": "token",
            "PIPELINE_BOARD_USER_ID": "user_id",
            "PIPELINE_BOARD_ROLE": "role",
            "PIPELINE_BOARD_POLL_INTERVAL": "poll_interval",
            "PIPELINE_BOARD_VIEW_STATE": "view_state_path",
        }
        for env_key, field in env_map.items():
            value = os.environ.get(env_key)
            if value:
                updates[field] = value.strip()
        if not updates:
            return settings
        return cls.model_validate({**settings.model_dump(), **updates})
