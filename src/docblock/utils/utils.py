# docblock/utils/utils.py
"""
docblock.utils.utils
====================

Configuration helpers for docblock.

Key functionalities include:
- Layered configuration: a hardcoded, built-in default configuration is
  recursively merged with the user's `~/.config/docblock/config.toml` (or the
  file named by `DOCBLOCK_CONFIG`, or an explicit path).
- First-run templates: `ensure_user_config_exists` creates the user config
  directory with a commented `config.toml` and an empty `.env`.
- `deep_merge` for nested configuration dictionaries.

The tool is always runnable: a missing or unparsable user file is logged and
the embedded defaults are used.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml

logger = logging.getLogger("docblock")

CONFIG_ENV_VAR = "DOCBLOCK_CONFIG"

ENV_TEMPLATE = """# Environment for docblock.
# DOCBLOCK_TRACE=1 records every block-context decision to trace.log.
DOCBLOCK_TRACE=
# DOCBLOCK_CONFIG=/path/to/config.toml
"""

CONFIG_TEMPLATE = """# docblock user configuration.
# Values here are merged over the built-in defaults.

[logging]
# file_level = "DEBUG"
# console_level = "WARNING"
# log_to_console = true
# separate_error_log = false

[docblock]
# use_scope_provider = true
# lookup_declarations = true
# exit_after_continuations = 1

# Add or override comment formats per language id:
# [comment_formats.kotlin]
# block_start = "/**"
# block_prefix = " * "
# block_end = " */"
# inline_prefix = "//"
# multi_line = true
#
# [comment_formats.aliases]
# kt = "kotlin"
"""

# This dictionary is the ultimate fallback, ensuring the tool can ALWAYS start.
# Comment formats are built into docblock.core.CommentFormats; the
# `comment_formats` section only carries user additions.
DEFAULT_CONFIG: Dict[str, Any] = {
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": True,
        "separate_error_log": False,
        "log_dir": "",
    },
    "docblock": {
        "use_scope_provider": True,
        "lookup_declarations": True,
        "exit_after_continuations": 1,
    },
    "editor": {"tab_size": 4, "use_spaces": True},
    "comment_formats": {},
}


# --- Helper Functions ---

def user_config_dir() -> Path:
    return Path.home() / ".config" / "docblock"


def ensure_user_config_exists() -> None:
    """Checks for user config files in `~/.config/docblock` and creates them if missing."""
    try:
        config_dir = user_config_dir()
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            user_config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user config template at: {user_config_path}")

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")

    except OSError as e:
        logger.error(f"Could not create user configuration files: {e}", exc_info=True)


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Explicit path first, then `DOCBLOCK_CONFIG`, then the user config file."""
    if path:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return user_config_dir() / "config.toml"


def load_config(path: Optional[Union[str, Path]] = None, create_templates: bool = False) -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the tool can always run.

    Args:
        path: Config file to merge over the defaults. When omitted,
            `DOCBLOCK_CONFIG` or `~/.config/docblock/config.toml` is used.
        create_templates: Create the user config directory and templates on
            first run (only when no explicit file was requested).
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    if create_templates and not path and not os.environ.get(CONFIG_ENV_VAR):
        ensure_user_config_exists()

    config_path = resolve_config_path(path)
    if config_path.is_file():
        try:
            user_config = toml.load(config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {config_path}")
        except (OSError, toml.TomlDecodeError) as e:
            logger.error(f"Could not parse user config '{config_path}': {e}. Using defaults.")
    elif path:
        logger.warning(f"Config file '{config_path}' not found. Using defaults.")

    return final_config
