"""Difficulty records understood by the search engine.

Two shapes are recognized:

- ``FixedDepth``: search each side to a fixed depth, playing a uniformly random
  legal move with probability ``noise``.
- ``TimeBudget``: iterative deepening up to ``max_depth`` within ``time_ms``.

``resolve_difficulty`` normalizes whatever a caller supplies (preset name,
record, or a camelCase/snake_case mapping from the wire) into one of these.
Absent or unrecognized input falls back to ``FixedDepth`` at the configured
default depth with no noise.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from baghmate.config import CONFIG


@dataclass(frozen=True)
class FixedDepth:
    depth_goat: int
    depth_tiger: int
    noise: float = 0.0


@dataclass(frozen=True)
class TimeBudget:
    time_ms: int
    max_depth: int = field(default_factory=lambda: CONFIG.search.max_depth)


Difficulty = Union[FixedDepth, TimeBudget]

PRESETS = {
    "easy": FixedDepth(depth_goat=1, depth_tiger=1, noise=0.35),
    "medium": FixedDepth(depth_goat=2, depth_tiger=2, noise=0.12),
    "hard": FixedDepth(depth_goat=4, depth_tiger=4, noise=0.0),
    "unbeatable": TimeBudget(time_ms=CONFIG.search.time_ms, max_depth=CONFIG.search.max_depth),
}


def default_difficulty() -> FixedDepth:
    depth = max(1, CONFIG.search.depth)
    return FixedDepth(depth, depth, _clamp_noise(CONFIG.search.noise))


def default_time_budget() -> TimeBudget:
    return TimeBudget(max(0, int(CONFIG.search.time_ms)), max(1, int(CONFIG.search.max_depth)))


def _clamp_noise(noise: Any) -> float:
    return min(1.0, max(0.0, float(noise)))


def _pick(raw: Mapping[str, Any], camel: str, snake: str) -> Optional[Any]:
    if raw.get(camel) is not None:
        return raw[camel]
    return raw.get(snake)


def resolve_difficulty(raw: Union[Difficulty, Mapping[str, Any], str, None]) -> Difficulty:
    if raw is None:
        return default_difficulty()
    if isinstance(raw, str):
        name = raw.lower()
        # read at call time so config changes after import still apply
        if name == "unbeatable":
            return default_time_budget()
        return PRESETS.get(name, default_difficulty())
    if isinstance(raw, TimeBudget):
        return TimeBudget(max(0, int(raw.time_ms)), max(1, int(raw.max_depth)))
    if isinstance(raw, FixedDepth):
        return FixedDepth(max(1, int(raw.depth_goat)), max(1, int(raw.depth_tiger)), _clamp_noise(raw.noise))
    if not isinstance(raw, Mapping):
        raise TypeError(f"Unsupported difficulty type: {type(raw).__name__}")

    time_ms = _pick(raw, "timeMs", "time_ms")
    if time_ms is not None:
        max_depth = _pick(raw, "maxDepth", "max_depth")
        if max_depth is None:
            max_depth = CONFIG.search.max_depth
        return TimeBudget(max(0, int(time_ms)), max(1, int(max_depth)))

    fallback = default_difficulty()
    depth_goat = _pick(raw, "depthGoat", "depth_goat")
    depth_tiger = _pick(raw, "depthTiger", "depth_tiger")
    noise = raw.get("noise")
    return FixedDepth(
        depth_goat=max(1, int(depth_goat)) if depth_goat is not None else fallback.depth_goat,
        depth_tiger=max(1, int(depth_tiger)) if depth_tiger is not None else fallback.depth_tiger,
        noise=_clamp_noise(noise) if noise is not None else fallback.noise,
    )
