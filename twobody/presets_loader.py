#!/usr/bin/env python3
"""
Scenario preset JSON loading utilities.

A preset describes a SimulationConfig: the two bodies' initial conditions,
physical constants, the integration method and pacing. Presets live in
twobody/presets/*.json; extra directories can be passed explicitly.

Schema
======
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "gravitational_constant": 6.6743e-11,   # optional, default G
  "mass_primary": 5.972e24,
  "mass_secondary": 7.349e22,
  "alpha": 2.0,                           # optional
  "time_step": 8640.0,                    # optional
  "algorithm": "rk4",                     # optional, "rk4" | "euler"
  "seconds_per_revolution": 3.0,          # optional
  "primary":   {"position": [0.0, 0.0],     "velocity": [0.0, 11.31]},
  "secondary": {"position": [3.844e8, 0.0], "velocity": [0.0, -918.9]}
}

Unlike listing, loading is strict: a missing file, invalid JSON or an unusable
value raises ConfigurationError.
"""
import json
import logging
import os
from dataclasses import fields
from typing import List, Optional, Tuple

from .config import ConfigurationError, SimulationConfig

logger = logging.getLogger(__name__)

PRESETS_DIR = os.path.join(os.path.dirname(__file__), "presets")

_CONFIG_FIELDS = {f.name for f in fields(SimulationConfig)}
_META_FIELDS = {"name", "description"}


def _read_json(path: str) -> dict:
  try:
    with open(path, "r", encoding="utf-8") as f:
      data = json.load(f)
  except OSError as exc:
    raise ConfigurationError(f"cannot read preset {path}: {exc}") from None
  except json.JSONDecodeError as exc:
    raise ConfigurationError(f"preset {path} is not valid JSON: {exc}") from None
  if not isinstance(data, dict):
    raise ConfigurationError(f"preset {path} must contain a JSON object")
  return data


def list_presets(presets_dir: Optional[str] = None) -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available presets."""
  presets_dir = presets_dir or PRESETS_DIR
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(presets_dir):
    return items
  for fn in sorted(os.listdir(presets_dir)):
    if not fn.lower().endswith(".json"):
      continue
    try:
      display = _read_json(os.path.join(presets_dir, fn)).get("name")
    except ConfigurationError as exc:
      logger.warning("Skipping preset %s: %s", fn, exc)
      continue
    items.append((fn, display or os.path.splitext(fn)[0]))
  return items


def config_from_dict(data: dict) -> SimulationConfig:
  """Build a SimulationConfig from a preset mapping."""
  unknown = set(data) - _CONFIG_FIELDS - _META_FIELDS
  if unknown:
    raise ConfigurationError(f"unknown preset keys: {', '.join(sorted(unknown))}")
  kwargs = {k: v for k, v in data.items() if k in _CONFIG_FIELDS}
  return SimulationConfig(**kwargs)


def load_preset(file_name: str, presets_dir: Optional[str] = None) -> SimulationConfig:
  """
  Load a preset JSON by file name (or by path).

  Raises:
    ConfigurationError: if the file is missing, malformed or invalid.
  """
  presets_dir = presets_dir or PRESETS_DIR
  path = file_name if os.path.isabs(file_name) else os.path.join(presets_dir, file_name)
  if not path.lower().endswith(".json") and not os.path.exists(path):
    path += ".json"
  config = config_from_dict(_read_json(path))
  logger.info("Loaded preset %s", os.path.basename(path))
  return config
