"""
Silhouette profile: one {y, x_start, width} row per drawn row of a component, indexed by y.
Later components query it (exact or nearest row) to anchor decorations to the drawn shape.
"""
from dataclasses import dataclass
from typing import Iterable, Iterator


@dataclass(frozen=True)
class SilhouetteRow:
    y: int
    x_start: int
    width: int

    def __post_init__(self) -> None:
        if self.width < 0:
            raise ValueError(f"Silhouette row width must be >= 0, got {self.width}")

    @property
    def x_end(self) -> int:
        """Last covered column (x_start - 1 for empty rows)."""
        return self.x_start + self.width - 1

    @property
    def center_x(self) -> int:
        return self.x_start + self.width // 2

    def contains(self, x: int) -> bool:
        return self.x_start <= x < self.x_start + self.width

    def to_dict(self) -> dict[str, int]:
        return {"y": self.y, "x_start": self.x_start, "width": self.width}


class Silhouette:
    """Rows keyed by y. Recording a row twice replaces it (e.g. a rounded base reshaping the bottom row)."""

    def __init__(self, rows: Iterable[SilhouetteRow] = ()) -> None:
        self._rows: dict[int, SilhouetteRow] = {}
        for row in rows:
            self._rows[row.y] = row

    @classmethod
    def from_points(cls, points: Iterable[tuple[int, int]]) -> "Silhouette":
        """Row spans (min x .. max x) of a set of drawn (x, y) cells."""
        spans: dict[int, tuple[int, int]] = {}
        for x, y in points:
            lo, hi = spans.get(y, (x, x))
            spans[y] = (min(lo, x), max(hi, x))
        return cls(SilhouetteRow(y, lo, hi - lo + 1) for y, (lo, hi) in spans.items())

    def record(self, y: int, x_start: int, width: int) -> SilhouetteRow:
        row = SilhouetteRow(int(y), int(x_start), max(0, int(width)))
        self._rows[row.y] = row
        return row

    def merge(self, other: "Silhouette") -> "Silhouette":
        """New silhouette covering both; overlapping rows become their union span."""
        merged = Silhouette(self.rows)
        for row in other.rows:
            mine = merged.row_at(row.y)
            if mine is None or mine.width == 0:
                merged.record(row.y, row.x_start, row.width)
            elif row.width > 0:
                lo = min(mine.x_start, row.x_start)
                hi = max(mine.x_end, row.x_end)
                merged.record(row.y, lo, hi - lo + 1)
        return merged

    @property
    def rows(self) -> list[SilhouetteRow]:
        return [self._rows[y] for y in sorted(self._rows)]

    @property
    def top(self) -> int | None:
        return min(self._rows) if self._rows else None

    @property
    def bottom(self) -> int | None:
        return max(self._rows) if self._rows else None

    def row_at(self, y: int) -> SilhouetteRow | None:
        """Exact lookup."""
        return self._rows.get(int(y))

    def nearest(self, y: int, *, within_extent: bool = True) -> SilhouetteRow | None:
        """
        Exact row if recorded, else the row with minimal |row.y - y| (ties go to the upper row).
        With within_extent, a target above the top or below the bottom row finds nothing.
        """
        y = int(y)
        exact = self._rows.get(y)
        if exact is not None:
            return exact
        if not self._rows:
            return None
        if within_extent and not (self.top <= y <= self.bottom):
            return None
        best: SilhouetteRow | None = None
        best_distance = None
        for row in self.rows:
            distance = abs(row.y - y)
            if best_distance is None or distance < best_distance:
                best, best_distance = row, distance
        return best

    def contains(self, x: int, y: int) -> bool:
        row = self._rows.get(int(y))
        return row is not None and row.contains(int(x))

    def between(self, y_min: int, y_max: int) -> "Silhouette":
        """Rows with y_min <= y <= y_max."""
        return Silhouette(r for r in self._rows.values() if y_min <= r.y <= y_max)

    def clipped(self, width: int, height: int) -> "Silhouette":
        """Rows inside a width x height grid with spans trimmed to its columns; a span wholly off the grid drops its row."""
        out = Silhouette()
        for row in self.between(0, height - 1):
            lo = max(0, row.x_start)
            hi = min(width - 1, row.x_end)
            if row.width == 0:
                out.record(row.y, min(lo, width - 1), 0)
            elif hi >= lo:
                out.record(row.y, lo, hi - lo + 1)
        return out

    def widest(self) -> SilhouetteRow | None:
        best = None
        for row in self.rows:
            if best is None or row.width > best.width:
                best = row
        return best

    def to_list(self) -> list[dict[str, int]]:
        return [row.to_dict() for row in self.rows]

    def __len__(self) -> int:
        return len(self._rows)

    def __bool__(self) -> bool:
        return bool(self._rows)

    def __iter__(self) -> Iterator[SilhouetteRow]:
        return iter(self.rows)

    def __repr__(self) -> str:
        return f"Silhouette(rows={len(self._rows)}, top={self.top}, bottom={self.bottom})"
