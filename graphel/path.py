from __future__ import annotations

from dataclasses import dataclass, field


Point = tuple[float, float]


@dataclass
class Path:
    """Recorded move-to/line-to commands, grouped into subpaths.

    A ``move_to`` always opens a new subpath; a ``line_to`` extends the
    current one (or opens one when the path is still empty).
    """

    subpaths: list[list[Point]] = field(default_factory=list)

    def move_to(self, x: float, y: float) -> None:
        self.subpaths.append([(float(x), float(y))])

    def line_to(self, x: float, y: float) -> None:
        if not self.subpaths:
            self.move_to(x, y)
            return
        self.subpaths[-1].append((float(x), float(y)))

    def is_empty(self) -> bool:
        return not self.subpaths

    @property
    def point_count(self) -> int:
        return sum(len(sub) for sub in self.subpaths)

    @property
    def segment_count(self) -> int:
        return sum(max(0, len(sub) - 1) for sub in self.subpaths)

    def points(self) -> list[Point]:
        return [pt for sub in self.subpaths for pt in sub]

    def segments(self):
        for sub in self.subpaths:
            for i in range(len(sub) - 1):
                yield sub[i], sub[i + 1]
