"""Move values: a goat placement, a slide to an adjacent cell, or a tiger capture."""

from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Place:
    dst: int

    def __str__(self) -> str:
        return f"@{self.dst}"


@dataclass(frozen=True)
class Slide:
    src: int
    dst: int

    def __str__(self) -> str:
        return f"{self.src}-{self.dst}"


@dataclass(frozen=True)
class Capture:
    src: int
    over: int
    dst: int

    def __str__(self) -> str:
        return f"{self.src}x{self.over}-{self.dst}"


Move = Union[Place, Slide, Capture]


def move_to_dict(move: Move) -> Dict[str, Any]:
    """Wire shape used by the network and UI layers."""
    if isinstance(move, Place):
        return {"type": "place", "to": move.dst}
    if isinstance(move, Slide):
        return {"type": "move", "from": move.src, "to": move.dst}
    return {"type": "capture", "from": move.src, "over": move.over, "to": move.dst}


def move_from_dict(data: Dict[str, Any]) -> Move:
    kind = data.get("type")
    try:
        if kind == "place":
            return Place(int(data["to"]))
        if kind == "move":
            return Slide(int(data["from"]), int(data["to"]))
        if kind == "capture":
            return Capture(int(data["from"]), int(data["over"]), int(data["to"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed {kind} move: {data!r}") from e
    raise ValueError(f"Unknown move type: {kind!r}")


def parse_move(text: str) -> Move:
    """Parse the string notation produced by ``str(move)``: ``@12``, ``7-8`` or ``0x6-12``."""
    s = text.strip()
    try:
        if s.startswith("@"):
            return Place(int(s[1:]))
        src, dst = s.split("-")
        if "x" in src:
            frm, over = src.split("x")
            return Capture(int(frm), int(over), int(dst))
        return Slide(int(src), int(dst))
    except ValueError as e:
        raise ValueError(f"Cannot parse move {text!r}") from e
