"""Seat derivation and reservation bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from pixeloffice.sim.catalog import get_catalog_entry
from pixeloffice.sim.contracts import Cell, Direction, PlacedFurniture


@dataclass
class Seat:
    uid: str
    desk_uid: str
    desk_col: int
    desk_row: int
    seat_col: int
    seat_row: int
    facing: Direction
    assigned: bool = False

    @property
    def cell(self) -> Cell:
        return (self.seat_col, self.seat_row)


def seat_candidates(item: PlacedFurniture, width: int, height: int) -> list[tuple[str, Cell, Direction]]:
    """One chair cell per side of the footprint, each facing the desk."""
    col, row = item.col, item.row
    return [
        ("top", (col, row - 1), Direction.DOWN),
        ("bottom", (col + width - 1, row + height), Direction.UP),
        ("left", (col - 1, row + height - 1), Direction.RIGHT),
        ("right", (col + width, row), Direction.LEFT),
    ]


def build_seats(
    furniture: Iterable[PlacedFurniture],
    cols: int,
    rows: int,
    blocked: set[Cell],
) -> dict[str, Seat]:
    seats: dict[str, Seat] = {}
    for item in furniture:
        entry = get_catalog_entry(item.type)
        if entry is None or not entry.generates_seats:
            continue
        for side, (seat_col, seat_row), facing in seat_candidates(
            item, entry.footprint_w, entry.footprint_h
        ):
            if not (0 <= seat_col < cols and 0 <= seat_row < rows):
                continue
            if (seat_col, seat_row) in blocked:
                continue
            uid = f"{item.uid}:{side}"
            seats[uid] = Seat(
                uid=uid,
                desk_uid=item.uid,
                desk_col=item.col,
                desk_row=item.row,
                seat_col=seat_col,
                seat_row=seat_row,
                facing=facing,
            )
    return seats


class SeatRegistry:
    """Ordered seats keyed by uid.

    Only ``OfficeState`` flips ``assigned``; the registry itself never decides
    who sits where.
    """

    def __init__(self, seats: dict[str, Seat] | None = None) -> None:
        self._seats: dict[str, Seat] = dict(seats or {})

    @classmethod
    def from_furniture(
        cls,
        furniture: Iterable[PlacedFurniture],
        cols: int,
        rows: int,
        blocked: set[Cell],
    ) -> "SeatRegistry":
        return cls(build_seats(furniture, cols, rows, blocked))

    def __len__(self) -> int:
        return len(self._seats)

    def __iter__(self) -> Iterator[Seat]:
        return iter(self._seats.values())

    def __contains__(self, uid: object) -> bool:
        return uid in self._seats

    def get(self, uid: str | None) -> Seat | None:
        if uid is None:
            return None
        return self._seats.get(uid)

    def first_free(self) -> Seat | None:
        for seat in self._seats.values():
            if not seat.assigned:
                return seat
        return None

    def claim(self, uid: str) -> Seat | None:
        seat = self._seats.get(uid)
        if seat is None or seat.assigned:
            return None
        seat.assigned = True
        return seat

    def release(self, uid: str | None) -> None:
        seat = self.get(uid)
        if seat is not None:
            seat.assigned = False

    def release_all(self) -> None:
        for seat in self._seats.values():
            seat.assigned = False

    def at_tile(self, col: int, row: int) -> Seat | None:
        for seat in self._seats.values():
            if seat.seat_col == col and seat.seat_row == row:
                return seat
        return None

    def cells(self) -> set[Cell]:
        return {seat.cell for seat in self._seats.values()}
