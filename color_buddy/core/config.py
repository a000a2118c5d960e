"""Configuration defaults and their environment overrides.

Load order (last wins):
  1. Built-in defaults on PaletteConfig.
  2. .env file at --env-file path, or the first .env found walking up from
     cwd, stopping at the nearest .git (file or dir).
  3. Process environment variables.

Command-line flags are applied on top by the CLI. Nothing here writes to
os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = 'COLORBUDDY_'

DEFAULT_PALETTE_HEIGHT = '256'
DEFAULT_NUMBER_OF_COLORS = 8
DEFAULT_ALPHA = 0xFF
DEFAULT_MAX_ITERATIONS = 50

# Settings that may come from the environment or a .env file, with their types
ENV_FIELDS: dict[str, type] = {
    'number_of_colors': int,
    'palette_height': str,
    'quantisation_method': str,
    'output_type': str,
    'max_iterations': int,
}


@dataclass(frozen=True)
class PaletteConfig:
    number_of_colors: int = DEFAULT_NUMBER_OF_COLORS
    palette_height: str = DEFAULT_PALETTE_HEIGHT
    quantisation_method: str = 'k-means'
    output_type: str = 'original-image'
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    alpha: int = DEFAULT_ALPHA

    def with_overrides(self, **overrides) -> PaletteConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _search_dirs(start: Path):
    """Yield start and its parents up to and including the first one holding .git."""
    for directory in (start.resolve(), *start.resolve().parents):
        yield directory
        if (directory / '.git').exists():
            return


def find_dotenv(start: Path) -> Path | None:
    """Return the nearest .env at or above start, without crossing a .git boundary."""
    return next((d / '.env' for d in _search_dirs(start) if (d / '.env').is_file()), None)


def _coerce(key: str, raw: str, kind: type) -> int | str | None:
    if kind is str:
        return raw
    try:
        return kind(raw)
    except ValueError:
        logger.warning('ignoring %s=%r: not an integer', key, raw)
        return None


def config_from_mapping(values: Mapping[str, str], base: PaletteConfig | None = None) -> PaletteConfig:
    """Apply the COLORBUDDY_* entries of values on top of base.

    Only the keys in ENV_FIELDS are read; anything else is ignored.
    """
    base = base or PaletteConfig()
    overrides = {}
    for name, kind in ENV_FIELDS.items():
        key = ENV_PREFIX + name.upper()
        if key in values:
            overrides[name] = _coerce(key, values[key], kind)
    return base.with_overrides(**overrides)


def config_from_dotenv(path: Path, base: PaletteConfig | None = None) -> PaletteConfig:
    """Apply the COLORBUDDY_* assignments of a .env file on top of base.

    Lines are KEY=value; blank lines and # comments are skipped and quotes
    around the value are removed.
    """
    values = {}
    for line in path.read_text(encoding='utf-8').splitlines():
        key, sep, raw_value = line.strip().partition('=')
        key = key.strip()
        if sep and key.startswith(ENV_PREFIX):
            values[key] = raw_value.strip().strip('"').strip("'")
    return config_from_mapping(values, base)


def load_config(env_file: str | None = None) -> tuple[PaletteConfig, Path | None]:
    """Build the effective configuration.

    Returns the config and the .env path that contributed to it, if any.
    """
    if env_file:
        path: Path | None = Path(env_file)
        if not path.is_file():
            logger.warning('env file not found: %s', env_file)
            path = None
    else:
        path = find_dotenv(Path.cwd())

    config = PaletteConfig()
    if path is not None:
        config = config_from_dotenv(path, config)
    config = config_from_mapping(os.environ, config)
    return config, path
