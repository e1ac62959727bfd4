import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roadloop.context import SceneContext

LOG_FORMAT = "[%(camera_z)s][%(tick)s][%(levelname)s][%(short_name)s] %(message)s"


class CameraZFilter(logging.Filter):
    """ログレコードにカメラ位置、tick番号、短縮ロガー名を付与するフィルター。"""

    def __init__(self, context: "SceneContext") -> None:
        super().__init__()
        self.context = context

    def filter(self, record: logging.LogRecord) -> bool:
        record.camera_z = f"z={self.context.camera_z:.2f}"
        record.tick = f"#{self.context.tick_count}"

        # 例: roadloop.pool.recyclable_pool -> recyclable_pool
        if "." in record.name:
            record.short_name = record.name.split(".")[-1]
        else:
            record.short_name = record.name

        return True


def configure_logging(context: "SceneContext", level: str | int = "INFO") -> logging.Handler:
    """Install a stream handler stamping records with the scene state.

    Args:
        context: Scene context whose camera position is stamped on records
        level: Root log level

    Returns:
        The installed handler
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    handler = logging.StreamHandler()
    handler.addFilter(CameraZFilter(context))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)
    return handler
