# mclang/config.py

"""
Runtime settings, read from environment variables with defaults.

    MCLANG_EPSILON     tolerance for probability-mass checks (default 1e-9)
    MCLANG_MAX_QUBITS  largest joint state the simulator will allocate (default 24)
    MCLANG_SEED        default seed for shot sampling (unset: OS entropy)
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_EPSILON = 1e-9
DEFAULT_MAX_QUBITS = 24


@dataclass(frozen=True)
class Settings:
    epsilon: float = DEFAULT_EPSILON
    max_qubits: int = DEFAULT_MAX_QUBITS
    seed: Optional[int] = None

    def __post_init__(self):
        if not self.epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}.")
        if self.max_qubits < 0:
            raise ValueError(f"max_qubits must be non-negative, got {self.max_qubits}.")

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            epsilon=_read(env, "MCLANG_EPSILON", float, DEFAULT_EPSILON),
            max_qubits=_read(env, "MCLANG_MAX_QUBITS", int, DEFAULT_MAX_QUBITS),
            seed=_read(env, "MCLANG_SEED", int, None),
        )


def _read(env, name, convert, default):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return convert(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name}={raw!r} is not a valid {convert.__name__}.")


def get_settings() -> Settings:
    """Settings for the current environment."""
    return Settings.from_env()
