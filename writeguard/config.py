"""TOML configuration loader.

Reads a ``[writeguard]`` table from a standalone TOML file, or the
``[tool.writeguard]`` table from ``pyproject.toml``. Only plain values are
configurable this way; predicates and prompt factories are passed in code.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from writeguard.errors import ConfigurationError
from writeguard.schemas.conflict import ConflictOptions, DiffMode

_KEYS = frozenset({"cwd", "dest", "overwrite", "silent", "show", "diff_mode", "probe_size"})


def _section(raw: dict[str, Any], path: Path) -> dict[str, Any]:
    if path.name == "pyproject.toml":
        return dict(raw.get("tool", {}).get("writeguard", {}))
    return dict(raw.get("writeguard", {}))


def load_options(config_path: Path | None = None, **overrides: Any) -> ConflictOptions:
    """Load ``ConflictOptions`` from TOML, then apply keyword overrides.

    Args:
        config_path: Config file. Defaults to ``./pyproject.toml`` when it
            exists, otherwise only the overrides are used.
        **overrides: Values that take precedence over the file. ``None``
            values are ignored.

    Returns:
        The merged options. Relative ``cwd`` and ``dest`` values from the
        file are resolved against the file's directory.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        ConfigurationError: If the table has unknown keys or bad values.
    """
    values: dict[str, Any] = {}

    path = config_path
    if path is None:
        default = Path.cwd() / "pyproject.toml"
        path = default if default.exists() else None
    elif not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path is not None:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        values = _section(raw, path)

        unknown = set(values) - _KEYS
        if unknown:
            raise ConfigurationError(
                f"Unknown writeguard option(s) in {path}: {', '.join(sorted(unknown))}"
            )
        root = path.parent.resolve()
        for key in ("cwd", "dest"):
            if key in values:
                values[key] = root / values[key]

    if "diff_mode" in values:
        try:
            values["diff_mode"] = DiffMode(values["diff_mode"])
        except ValueError as e:
            raise ConfigurationError(f"Invalid diff_mode: {values['diff_mode']!r}") from e

    values.update({k: v for k, v in overrides.items() if v is not None})
    return ConflictOptions(**values)
