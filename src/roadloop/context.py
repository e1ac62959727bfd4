"""Scene context shared by pools, the editor layout and logging."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from roadloop.data import PlacedObject


@dataclass
class SceneContext:
    """シーン全体の状態.

    名前付きオブジェクトのレジストリと現在のカメラ位置を保持する。
    """

    camera_z: float = 0.0
    tick_count: int = 0
    registry: dict[str, PlacedObject] = field(default_factory=dict)

    def register(self, obj: PlacedObject) -> None:
        """Register an object under its name.

        Raises:
            ValueError: If another object already uses the name
        """
        existing = self.registry.get(obj.name)
        if existing is not None and existing is not obj:
            msg = f"Object name already registered: {obj.name}"
            raise ValueError(msg)
        self.registry[obj.name] = obj

    def register_all(self, objects: Iterable[PlacedObject]) -> None:
        for obj in objects:
            self.register(obj)

    def get(self, name: str) -> PlacedObject | None:
        return self.registry.get(name)

    def objects(self, prefix: str | None = None) -> list[PlacedObject]:
        """Registered objects in registration order, optionally filtered by name prefix."""
        if prefix is None:
            return list(self.registry.values())
        return [obj for name, obj in self.registry.items() if name.startswith(prefix)]
