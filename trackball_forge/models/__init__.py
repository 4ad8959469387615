"""
Builder autodiscovery.

For every module `models/<name>.py` a builder is registered by these rules
(in order):

1) `BUILDER: Callable` if defined.
2) `BUILD: dict` -> `BUILD["make"]`.
3) A `make_model` / `make` / `build` function.
4) snake <-> kebab aliases are always created.
5) `NAME: str` and `SLUGS: list[str]` add further aliases.

Private modules (`_helpers`) and the CSG module (`geom`) are skipped.
"""
from __future__ import annotations

import importlib
import logging
import pkgutil
from types import ModuleType
from typing import Callable, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

# --------------------- Registry and aliases ---------------------

REGISTRY: Dict[str, Callable] = {}
ALIASES: Dict[str, str] = {}
MODULES: Dict[str, ModuleType] = {}

_SKIP = {"geom"}


def _register(name_snake: str, fn: Callable, mod: ModuleType) -> None:
    key = name_snake.lower()
    REGISTRY[key] = fn
    MODULES[key] = mod
    ALIASES.setdefault(key, key)
    ALIASES.setdefault(key.replace("_", "-"), key)


def _add_alias(raw_slug: str, target_snake: str) -> None:
    """Adds an alias without overwriting existing entries."""
    raw = raw_slug.strip().lower()
    snake = target_snake.strip().lower()
    if not raw or not snake:
        return
    ALIASES.setdefault(raw, snake)
    if "_" in raw:
        ALIASES.setdefault(raw.replace("_", "-"), snake)
    else:
        ALIASES.setdefault(raw.replace("-", "_"), snake)


def _pick_builder(mod: ModuleType) -> Optional[Callable]:
    fn = getattr(mod, "BUILDER", None)
    if callable(fn):
        return fn
    build_dict = getattr(mod, "BUILD", None)
    if isinstance(build_dict, dict) and callable(build_dict.get("make")):
        return build_dict["make"]
    for attr in ("make_model", "make", "build"):
        f = getattr(mod, attr, None)
        if callable(f):
            return f
    return None


# --------------------- Module discovery ---------------------

for _finder, _name, _ispkg in pkgutil.iter_modules(__path__):
    if _ispkg or _name.startswith("_") or _name in _SKIP:
        continue

    mod = importlib.import_module(f"{__name__}.{_name}")
    fn = _pick_builder(mod)
    if fn is None:
        logger.debug("models.%s exposes no builder, skipped", _name)
        continue
    _register(_name, fn, mod)

    name_alias = getattr(mod, "NAME", None)
    if isinstance(name_alias, str):
        _add_alias(name_alias, _name)

    slugs: Iterable[str] = getattr(mod, "SLUGS", []) or []
    for s in slugs:
        if isinstance(s, str):
            _add_alias(s, _name)


# --------------------- Lookup API -----------------------

def resolve(slug_or_name: Optional[str]) -> Optional[str]:
    """Registered snake_case name for a slug or alias, or None."""
    if not slug_or_name:
        return None
    raw = slug_or_name.strip().lower()
    snake = ALIASES.get(raw, ALIASES.get(raw.replace("-", "_")))
    return snake if snake in REGISTRY else None


def get_builder(slug_or_name: Optional[str]) -> Optional[Callable]:
    """Mesh builder (`params -> Trimesh`) for a slug, or None."""
    key = resolve(slug_or_name)
    return REGISTRY.get(key) if key else None


def get_svg_builder(slug_or_name: Optional[str]) -> Optional[Callable]:
    """2D template builder for a slug, or None when the part has no plan view."""
    key = resolve(slug_or_name)
    if not key:
        return None
    build_dict = getattr(MODULES[key], "BUILD", None) or {}
    fn = build_dict.get("svg") or getattr(MODULES[key], "make_svg", None)
    return fn if callable(fn) else None


__all__ = [
    "REGISTRY",
    "ALIASES",
    "MODULES",
    "resolve",
    "get_builder",
    "get_svg_builder",
]
