# baghmate/config.py
from dataclasses import dataclass, field
import logging
import os
import tomllib  # python >=3.11

logger = logging.getLogger(__name__)

# Heuristic weights, positive favors goats
EVAL_WEIGHTS = {
    "live_goat": 6.0,
    "goat_captured": -95.0,
    "goat_mobility": 5.5,
    "tiger_mobility": -3.8,
    "vulnerable_goat": -20.0,
    "semi_trapped_tiger": 22.0,
    "goat_centrality": 0.9,
    "tiger_centrality": -0.6,
    "cluster_placement": -2.2,
    "cluster_movement": -1.2,
    "goats_to_place": -4.5,
}

@dataclass
class SearchConfig:
    depth: int = 4  # default fixed depth for both sides
    max_depth: int = 12  # iterative deepening ceiling
    time_ms: int = 3000
    noise: float = 0.0  # probability of a random legal move
    log_iterations: bool = True

@dataclass
class EvalConfig:
    live_goat: float = EVAL_WEIGHTS["live_goat"]
    goat_captured: float = EVAL_WEIGHTS["goat_captured"]
    goat_mobility: float = EVAL_WEIGHTS["goat_mobility"]
    tiger_mobility: float = EVAL_WEIGHTS["tiger_mobility"]
    vulnerable_goat: float = EVAL_WEIGHTS["vulnerable_goat"]
    semi_trapped_tiger: float = EVAL_WEIGHTS["semi_trapped_tiger"]
    goat_centrality: float = EVAL_WEIGHTS["goat_centrality"]
    tiger_centrality: float = EVAL_WEIGHTS["tiger_centrality"]
    cluster_placement: float = EVAL_WEIGHTS["cluster_placement"]
    cluster_movement: float = EVAL_WEIGHTS["cluster_movement"]
    goats_to_place: float = EVAL_WEIGHTS["goats_to_place"]

@dataclass
class UIConfig:
    engine_name: str = "BaghMate"

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
                else:
                    logger.warning("Ignoring unknown config key %s.%s", section, k)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("BAGHMATE_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
override_depth = os.environ.get("BAGHMATE_SEARCH_DEPTH")
if override_depth:
    try:
        CONFIG.search.depth = int(override_depth)
    except ValueError:
        logger.warning("Ignoring non-integer BAGHMATE_SEARCH_DEPTH=%r", override_depth)
