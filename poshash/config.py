from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from poshash.core.rng import SOURCES
from poshash.core.zobrist import DEFAULT_ALGORITHM, DEFAULT_SEED, ZobristTable, generate

ENV_SEED = "POSHASH_SEED"
ENV_ALGORITHM = "POSHASH_RNG"


def parse_seed(text: str) -> int:
    """Decimal or 0x-prefixed hex seed."""
    text = text.strip()
    try:
        return int(text, 0)
    except ValueError:
        raise ValueError(f"invalid seed: {text!r}") from None


def parse_algorithm(text: str) -> str:
    name = text.strip().lower()
    if name not in SOURCES:
        raise ValueError(f"unknown random algorithm: {text!r} (expected one of {sorted(SOURCES)})")
    return name


@dataclass(slots=True)
class HashSettings:
    seed: int = DEFAULT_SEED
    algorithm: str = DEFAULT_ALGORITHM

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "HashSettings":
        env = os.environ if environ is None else environ
        settings = HashSettings()
        if env.get(ENV_SEED):
            settings.seed = parse_seed(env[ENV_SEED])
        if env.get(ENV_ALGORITHM):
            settings.algorithm = parse_algorithm(env[ENV_ALGORITHM])
        return settings

    def table(self) -> ZobristTable:
        return generate(self.seed, self.algorithm)
