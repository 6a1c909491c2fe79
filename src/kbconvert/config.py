#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading.

A configuration file groups the option classes by section::

    vault = "~/notes"

    [markdown]
    wiki_link_mode = "text"

    [docx]
    default_font = "Calibri"

    [styles.callout_styles.warning]
    background = "FFF8E1"

    [cleanup]
    detect_commands = false

    [import]
    image_link_format = "markdown-relative"

TOML, YAML and JSON files are accepted, as is a ``[tool.kbconvert]`` table
in ``pyproject.toml``. Configuration is read-only; nothing here writes files.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from kbconvert.constants import CONFIG_FILENAMES, PYPROJECT_TOOL_SECTION
from kbconvert.exceptions import ConfigError
from kbconvert.options.cleanup import CleanupOptions
from kbconvert.options.docx import DocxRendererOptions
from kbconvert.options.importer import ImportOptions
from kbconvert.options.markdown import MarkdownParserOptions
from kbconvert.options.styles import StyleConfig

logger = logging.getLogger(__name__)

_SECTIONS = ("vault", "markdown", "docx", "styles", "cleanup", "import")
_LEVEL_KEYED_FIELDS = ("heading_font_sizes", "heading_spacing_before")


@dataclass(frozen=True)
class KbConvertConfig:
    """All conversion settings, as loaded from a configuration file.

    Parameters
    ----------
    markdown : MarkdownParserOptions
        Note parsing and extension settings
    docx : DocxRendererOptions
        Fonts, colors and layout of exported documents
    styles : StyleConfig
        Callout, code block and table styles
    cleanup : CleanupOptions
        Heuristic cleanup passes for imported text
    importer : ImportOptions
        Image handling and note layout for imports
    vault : str or None
        Notes directory searched for embedded images

    """

    markdown: MarkdownParserOptions = field(default_factory=MarkdownParserOptions)
    docx: DocxRendererOptions = field(default_factory=DocxRendererOptions)
    styles: StyleConfig = field(default_factory=StyleConfig)
    cleanup: CleanupOptions = field(default_factory=CleanupOptions)
    importer: ImportOptions = field(default_factory=ImportOptions)
    vault: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str | None = None) -> KbConvertConfig:
        """Build a config from a parsed configuration mapping.

        Raises
        ------
        ConfigError
            On unknown sections, unknown keys or invalid values

        """
        unknown = set(data) - set(_SECTIONS)
        if unknown:
            raise ConfigError(f"Unknown configuration section(s): {', '.join(sorted(unknown))}", config_path=source)

        for section in _SECTIONS[1:]:
            if section in data and not isinstance(data[section], dict):
                raise ConfigError(
                    f"Section [{section}] must be a table, got {type(data[section]).__name__}", config_path=source
                )

        try:
            docx_values = dict(data.get("docx", {}))
            for name in _LEVEL_KEYED_FIELDS:
                if name in docx_values:
                    docx_values[name] = {int(level): int(value) for level, value in docx_values[name].items()}

            vault = data.get("vault")
            return cls(
                markdown=MarkdownParserOptions.from_dict(data.get("markdown", {})),
                docx=DocxRendererOptions.from_dict(docx_values),
                styles=StyleConfig.from_dict(data.get("styles", {})),
                cleanup=CleanupOptions.from_dict(data.get("cleanup", {})),
                importer=ImportOptions.from_dict(data.get("import", {})),
                vault=str(vault) if vault is not None else None,
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}", config_path=source, original_error=e) from e


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Return the ``[tool.kbconvert]`` table of a pyproject.toml, or an empty dict."""
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)

    config = data.get("tool", {}).get(PYPROJECT_TOOL_SECTION, {})
    if not isinstance(config, dict):
        raise ConfigError(
            f"[tool.{PYPROJECT_TOOL_SECTION}] in {pyproject_path} must be a table, got {type(config).__name__}",
            config_path=str(pyproject_path),
        )
    return config


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load a configuration mapping from JSON, TOML, YAML or pyproject.toml.

    Raises
    ------
    ConfigError
        If the file is missing, unreadable, malformed or of an unknown type

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigError(f"Configuration file does not exist: {config_path}", config_path=str(config_path))

    ext = config_path.suffix.lower()
    try:
        if config_path.name.lower() == "pyproject.toml":
            config = _load_pyproject_section(config_path)
        elif ext == ".toml":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif ext in (".yaml", ".yml"):
            with open(config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        elif ext == ".json":
            with open(config_path, encoding="utf-8") as f:
                config = json.load(f)
        else:
            raise ConfigError(
                f"Unsupported config file format: {ext}. Use .toml, .yaml or .json", config_path=str(config_path)
            )
    except ConfigError:
        raise
    except (OSError, tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(
            f"Error reading config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e

    if not isinstance(config, dict):
        raise ConfigError(
            f"Config file must contain a mapping at root level, got {type(config).__name__}",
            config_path=str(config_path),
        )
    return config


def find_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file in ``start_dir`` or any parent directory.

    Each directory is checked for ``.kbconvert.toml``, ``.kbconvert.yaml``,
    ``.kbconvert.yml``, ``.kbconvert.json`` and finally a ``pyproject.toml``
    holding a ``[tool.kbconvert]`` table. Unreadable pyproject files are
    skipped.

    Returns
    -------
    Path or None
        The first file found, or None

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            candidate = current / filename
            if not candidate.is_file():
                continue
            if filename != "pyproject.toml":
                return candidate
            try:
                if _load_pyproject_section(candidate):
                    return candidate
            except (ConfigError, OSError, tomllib.TOMLDecodeError) as e:
                logger.debug("Skipping unreadable %s: %s", candidate, e)

        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config(config_path: Path | str | None = None, discover: bool = True) -> KbConvertConfig:
    """Load settings from ``config_path`` or a discovered configuration file.

    Parameters
    ----------
    config_path : Path or str, optional
        Explicit configuration file
    discover : bool, default True
        Search the working directory and its parents when no path is given

    Returns
    -------
    KbConvertConfig
        Loaded settings, or defaults when no file is found

    Raises
    ------
    ConfigError
        If the file cannot be loaded or holds invalid settings

    """
    if config_path is None and discover:
        config_path = find_config_file()
    if config_path is None:
        return KbConvertConfig()

    logger.debug("Loading configuration from %s", config_path)
    return KbConvertConfig.from_dict(load_config_file(config_path), source=str(config_path))
