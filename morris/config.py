from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from morris.core.board import CELLS_PER_RING
from morris.core.errors import ConfigError

MIN_PIECES = 3


@dataclass(frozen=True)
class GameConfig:
    layer_count: int = 2
    pieces_per_player: int = 6

    def __post_init__(self) -> None:
        if self.layer_count < 1:
            raise ConfigError("layer_count must be at least 1.", context={"layer_count": self.layer_count})
        if self.pieces_per_player < MIN_PIECES:
            raise ConfigError(
                f"pieces_per_player must be at least {MIN_PIECES}.",
                context={"pieces_per_player": self.pieces_per_player},
            )
        if 2 * self.pieces_per_player > self.cell_count:
            raise ConfigError(
                "Not enough cells for both players' pieces.",
                context={"cells": self.cell_count, "pieces_per_player": self.pieces_per_player},
            )

    @property
    def cell_count(self) -> int:
        return self.layer_count * CELLS_PER_RING


VARIANTS: Dict[str, GameConfig] = {
    "six": GameConfig(layer_count=2, pieces_per_player=6),
    "nine": GameConfig(layer_count=3, pieces_per_player=9),
    "twelve": GameConfig(layer_count=3, pieces_per_player=12),
}


def variant(name: str) -> GameConfig:
    try:
        return VARIANTS[name]
    except KeyError:
        raise ConfigError(f"Unknown variant {name!r}.", context={"known": sorted(VARIANTS)}) from None


@dataclass(frozen=True)
class RunConfig:
    """Settings read from a YAML file for the scripts."""

    game: GameConfig = field(default_factory=GameConfig)
    seed: Optional[int] = None
    max_ply: int = 200


def load_yaml_config(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file {path} not found.")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping.")
    return data


def config_from_dict(cfg: Dict[str, Any]) -> RunConfig:
    base = variant(cfg.get("variant", "six"))
    try:
        game = GameConfig(
            layer_count=int(cfg.get("layer_count", base.layer_count)),
            pieces_per_player=int(cfg.get("pieces_per_player", base.pieces_per_player)),
        )
        seed = cfg.get("seed")
        return RunConfig(
            game=game,
            seed=None if seed is None else int(seed),
            max_ply=int(cfg.get("max_ply", RunConfig.max_ply)),
        )
    except ConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc


def load_config(path: Union[str, Path]) -> RunConfig:
    return config_from_dict(load_yaml_config(path))
