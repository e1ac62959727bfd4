from roadloop.utils.logging import CameraZFilter, configure_logging

__all__ = [
    "CameraZFilter",
    "configure_logging",
]
