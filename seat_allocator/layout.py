"""
seat_allocator/layout.py

Expands a Layout into the flat, ordered seat list the allocator walks.
Two seats are adjacent iff they are consecutive in this list and share a room.
"""

from typing import List

from .models import Layout, Seat


def flatten_layout(layout: Layout) -> List[Seat]:
    """
    Blocks, floors and rooms in declaration order; inside a room,
    positions 1..bench_count*occupants_per_bench.
    """
    seats: List[Seat] = []
    for block, floor, room in layout.iter_rooms():
        for position in range(1, room.seat_count + 1):
            seats.append(Seat(
                block_id=block.block_id,
                floor_id=floor.floor_id,
                room_id=room.room_id,
                position=position,
                occupants_per_bench=room.occupants_per_bench,
            ))
    return seats


def is_adjacent(first: Seat, second: Seat) -> bool:
    return first.room_key == second.room_key and abs(first.position - second.position) == 1
