import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from loguru import logger

RESOURCE_FOLDER: Path = Path(__file__).parent / "resources"


def dotexpand(paths: str | list[str]) -> list[str]:
    """Expands comma separated alternatives. A ':' separator matches both 'a.b' and 'a_b'."""
    if not paths:
        return []
    if not isinstance(paths, (str, list)):
        raise ValueError("dot path must be a string or list of strings")
    expanded: list[str] = []
    for path in paths if isinstance(paths, list) else [paths]:
        for alternative in path.replace(" ", "").split(","):
            if not alternative:
                continue
            if ":" in alternative:
                expanded.extend([alternative.replace(":", "."), alternative.replace(":", "_")])
            else:
                expanded.append(alternative)
    return expanded


def dotget(data: dict, path: str, default: Any = None) -> Any:
    """Returns the first value found for any of the alternatives in `path`."""
    for key in dotexpand(path):
        node: Any = data
        for part in key.split("."):
            node = node.get(part) if isinstance(node, dict) else None
            if node is None:
                break
        if node is not None:
            return node
    return default


def dget(data: dict, *paths: str, default: Any = None) -> Any:
    if not paths or not data:
        return default
    for path in paths:
        value: Any = dotget(data, path)
        if value is not None:
            return value
    return default


def dotexists(data: dict, *paths: str) -> bool:
    return any(dotget(data, path, default="@@") != "@@" for path in paths)


def dotset(data: dict, path: str, value: Any) -> dict:
    """Sets a value using x.y.z or x:y:z notation, creating intermediate dicts."""
    node: dict = data
    parts: list[str] = path.replace(":", ".").split(".")
    for part in parts[:-1]:
        if part:
            node = node.setdefault(part, {})
    node[parts[-1]] = value
    return data


def env2dict(prefix: str, data: dict[str, Any] | None = None, lower_key: bool = True) -> dict[str, Any]:
    """Merges environment variables named PREFIX_A_B into data["a"]["b"]."""
    if data is None:
        data = {}
    if not prefix:
        return data
    if lower_key:
        prefix = prefix.lower()
    for key, value in os.environ.items():
        if lower_key:
            key = key.lower()
        if key.startswith(prefix):
            dotset(data, key[len(prefix) + 1 :].replace("_", ":"), value)
    return data


def replace_env_vars(data: dict[str, Any] | list[Any] | str) -> dict[str, Any] | list[Any] | str:
    """Recursively replaces "${ENV_NAME}" string values with os.getenv("ENV_NAME", "")"""
    if isinstance(data, dict):
        return {k: replace_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [replace_env_vars(v) for v in data]
    if isinstance(data, str) and data.startswith("${") and data.endswith("}"):
        return os.getenv(data[2:-1], "")
    return data


def configure_logging(opts: dict[str, Any] | None = None) -> None:

    logger.remove()
    logger.add(
        sys.stdout,
        level=(opts or {}).get("level", "INFO"),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}",
    )
    if not opts or not opts.get("handlers"):
        return

    handlers: list[dict[str, Any]] = []
    for handler in opts["handlers"]:
        sink: Any = handler.get("sink")
        if not sink:
            continue
        if sink == "sys.stdout":
            sink = sys.stdout
        elif sink == "sys.stderr":
            sink = sys.stderr
        elif isinstance(sink, str) and sink.endswith(".log"):
            sink = os.path.join(opts.get("folder", "logs"), f"{datetime.now().strftime('%Y%m%d')}_{sink}")
        handlers.append(handler | {"sink": sink})

    logger.configure(handlers=handlers)


def _ensure_key_property(cls):
    if not hasattr(cls, "key"):

        def key(self) -> str:
            return getattr(self, "_registry_key", "unknown")

        cls.key = property(key)
    return cls


class Registry:
    """Class decorator registry, keyed by name. Subclasses must declare their own `items`."""

    items: dict = {}

    @classmethod
    def get(cls, key: str) -> Any:
        if key not in cls.items:
            raise KeyError(f"{key} is not registered in {cls.__name__}")
        return cls.items[key]

    @classmethod
    def register(cls, **args) -> Callable[..., Any]:
        def decorator(fn_or_class):
            key: str = args.get("key") or fn_or_class.__name__
            setattr(fn_or_class, "_registry_key", key)
            fn_or_class = _ensure_key_property(fn_or_class)
            cls.items[key] = fn_or_class
            return fn_or_class

        return decorator

    @classmethod
    def is_registered(cls, key: str) -> bool:
        return key in cls.items


def create_db_uri(*, host: str, port: int | str, user: str, dbname: str, password: str | None = None) -> str:
    """
    Builds database URI from the individual config elements.
    """
    credentials: str = f"{user}:{password}" if password else user
    return f"postgresql://{credentials}@{host}:{port}/{dbname}"


def load_resource_text(filename: str) -> str:
    """Reads a file shipped in the package resources folder."""
    resource_path: Path = RESOURCE_FOLDER / filename
    if not resource_path.exists():
        raise FileNotFoundError(f"Resource not found: {resource_path}")
    return resource_path.read_text(encoding="utf-8")
