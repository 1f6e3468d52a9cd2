"""Configuration defaults for the AsyncAPI extension.

Values come from the environment (a ``.env`` file is loaded first) unless the
application already set them in ``app.config``.
"""
import os
from typing import Any, Dict, Mapping

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TITLE = "API Documentation"
DEFAULT_VERSION = "1.0.0"

_TRUE = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUE


def apply_defaults(app) -> None:
    """Fill missing ASYNCAPI_* keys of ``app.config``; explicit settings win."""
    app.config.setdefault("ASYNCAPI_TITLE", os.getenv("ASYNCAPI_TITLE", DEFAULT_TITLE))
    app.config.setdefault("ASYNCAPI_VERSION", os.getenv("ASYNCAPI_VERSION", DEFAULT_VERSION))
    app.config.setdefault("ASYNCAPI_DESCRIPTION", os.getenv("ASYNCAPI_DESCRIPTION"))
    app.config.setdefault("ASYNCAPI_STRICT", _env_flag("ASYNCAPI_STRICT"))


def default_info(config: Mapping[str, Any]) -> Dict[str, Any]:
    info = {
        "title": config.get("ASYNCAPI_TITLE") or DEFAULT_TITLE,
        "version": config.get("ASYNCAPI_VERSION") or DEFAULT_VERSION,
    }
    if config.get("ASYNCAPI_DESCRIPTION"):
        info["description"] = config["ASYNCAPI_DESCRIPTION"]
    return info


__all__ = ["DEFAULT_TITLE", "DEFAULT_VERSION", "apply_defaults", "default_info"]
