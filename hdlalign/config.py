"""Alignment and workspace configuration for hdlalign."""

from __future__ import annotations

import json
import logging
import shlex
import tomllib
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from hdlalign.errors import AlignConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("hdlalign.toml", ".hdlalign.json")


@dataclass(frozen=True)
class AlignConfig:
    """Target columns and padding widths used by every aligner.

    Column numbers are 0-indexed positions measured from the start of the
    line. Every option has a default, so an empty mapping is a valid
    configuration.
    """

    # Port declarations: direction, signed/unsigned, range, identifier, ';'
    port_num1: int = 4
    port_num2: int = 16
    port_num3: int = 25
    port_num4: int = 50
    port_num5: int = 80

    # reg/wire/integer declarations
    signal_num1: int = 4
    signal_num2: int = 16
    signal_num3: int = 25
    signal_num4: int = 50
    signal_num5: int = 80

    # parameter/localparam: keyword, identifier, '=', terminator
    param_num1: int = 4
    param_num2: int = 25
    param_num3: int = 50
    param_num4: int = 80

    # assign: keyword, lvalue, '=' (0 keeps a single space)
    assign_num1: int = 4
    assign_num2: int = 12
    assign_num3: int = 0

    # Instantiation: column of '(' after .name
    inst_param_value_col: int = 60
    inst_port_value_col: int = 60

    # Declarations with an unpacked dimension
    array_num1: int = 4
    array_num2: int = 16
    array_num3: int = 25
    array_num4: int = 50
    array_num5: int = 60
    array_num6: int = 80

    # Bit-range field widths inside [msb:lsb]
    upbound: int = 2
    lowbound: int = 2

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise AlignConfigError(
                    f"Option '{item.name}' must be an integer, got {value!r}",
                    hint="Column options are non-negative integers.",
                )
            if value < 0:
                raise AlignConfigError(
                    f"Option '{item.name}' must be non-negative, got {value}",
                )

    @classmethod
    def option_names(cls) -> List[str]:
        return [item.name for item in fields(cls)]

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "AlignConfig":
        """Build a config from a flat option mapping.

        Keys may carry a dotted prefix (``hdlalign.port_num1``) as editor
        settings do. Unknown keys are ignored and missing keys keep their
        defaults.
        """
        if not mapping:
            return cls()
        known = set(cls.option_names())
        values: Dict[str, int] = {}
        for raw_key, raw_value in mapping.items():
            key = str(raw_key).rsplit(".", 1)[-1]
            if key not in known:
                logger.debug("Ignoring unknown alignment option %r", raw_key)
                continue
            values[key] = _coerce_int(key, raw_value)
        return cls(**values)

    def get(self, name: str, default: Optional[int] = None) -> Optional[int]:
        key = name.rsplit(".", 1)[-1]
        if key in self.option_names():
            return getattr(self, key)
        return default

    def to_mapping(self) -> Dict[str, int]:
        return asdict(self)

    def with_overrides(self, **changes: int) -> "AlignConfig":
        return replace(self, **changes)


def _coerce_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise AlignConfigError(f"Option '{key}' must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise AlignConfigError(
            f"Option '{key}' must be an integer, got {value!r}",
            hint="Use a plain column number such as 40.",
        ) from exc


@dataclass
class ParserConfig:
    """External parser used to produce syntax tree JSON files."""

    command: List[str] = field(default_factory=list)
    timeout: float = 30.0
    tree_suffix: str = ".ast.json"

    @property
    def enabled(self) -> bool:
        return bool(self.command)


@dataclass
class WorkspaceConfig:
    """Resolved workspace configuration."""

    root: Path
    align: AlignConfig = field(default_factory=AlignConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    source: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    return json.loads(content)


def _read_toml_config(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _parse_parser(data: Dict[str, Any]) -> ParserConfig:
    section = data.get("parser") or {}
    command_raw = section.get("command") or []
    if isinstance(command_raw, str):
        command = shlex.split(command_raw)
    elif isinstance(command_raw, (list, tuple)):
        command = [str(item) for item in command_raw]
    else:
        raise AlignConfigError("parser.command must be a string or a list of arguments")
    timeout = float(section.get("timeout", ParserConfig.timeout))
    tree_suffix = str(section.get("tree_suffix") or ParserConfig.tree_suffix)
    return ParserConfig(command=command, timeout=timeout, tree_suffix=tree_suffix)


def _parse_align(data: Dict[str, Any]) -> AlignConfig:
    section = data.get("align")
    if section is None:
        # Flat files hold the column options at the top level.
        section = {key: value for key, value in data.items() if not isinstance(value, dict)}
    if not isinstance(section, dict):
        raise AlignConfigError("The [align] section must be a table of options")
    return AlignConfig.from_mapping(section)


def find_config_file(root: Path) -> Optional[Path]:
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_workspace_config(root: Optional[Path] = None, config_path: Optional[Path] = None) -> WorkspaceConfig:
    """Load ``hdlalign.toml`` / ``.hdlalign.json`` for a workspace.

    A missing file yields the defaults. An explicitly requested file that
    does not exist, cannot be parsed or holds invalid values raises
    :class:`AlignConfigError`.
    """
    root = (root or Path.cwd()).resolve()
    path = config_path
    if path is None:
        path = find_config_file(root)
        if path is None:
            return WorkspaceConfig(root=root)
    elif not path.is_file():
        raise AlignConfigError(f"Configuration file not found: {path}", path=str(path))

    try:
        if path.suffix == ".toml":
            data = _read_toml_config(path)
        else:
            data = _read_json_config(path)
    except (OSError, ValueError) as exc:
        raise AlignConfigError(f"Could not read configuration: {exc}", path=str(path)) from exc

    if not isinstance(data, dict):
        raise AlignConfigError("Configuration root must be a table", path=str(path))

    return WorkspaceConfig(
        root=root,
        align=_parse_align(data),
        parser=_parse_parser(data),
        source=path,
        raw=data,
    )


__all__ = [
    "AlignConfig",
    "ParserConfig",
    "WorkspaceConfig",
    "find_config_file",
    "load_workspace_config",
]
