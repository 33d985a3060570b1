"""Loading and validation of the YAML descriptor tables."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from nmprops.codecs import hooks
from nmprops.codecs.base import Codec
from nmprops.codecs.composite import (
    DcbArrayCodec,
    IPAddressCodec,
    OptionMapCodec,
    ip_address_list_codec,
    ip_route_list_codec,
    link_watcher_list_codec,
    priority_map_codec,
    string_list_codec,
)
from nmprops.codecs.enum import EnumCodec, HYBRID, NUMERIC
from nmprops.codecs.hwaddr import ETH_ALEN, BytesCodec, MacCodec, SsidCodec
from nmprops.codecs.scalar import BoolCodec, IntCodec
from nmprops.codecs.security import CertificateCodec
from nmprops.codecs.text import FileTextCodec, StringCodec
from nmprops.core.composition import CompositionTable
from nmprops.core.errors import PropertyError, TableLoadError, TableValidationError
from nmprops.core.model import EnumType, EnumValue, PropertyDescriptor, SettingInfo, SlaveParts, ValidPart
from nmprops.parsers.tokens import MAXINT32

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys and keeps yes/no/on/off as strings."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: [(tag, regexp) for tag, regexp in value if tag != "tag:yaml.org,2002:bool"]
    for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise TableValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedTables:
    settings: dict[str, SettingInfo]
    enums: dict[str, EnumType]
    composition: CompositionTable
    warnings: tuple[str, ...]


def _load_schema_validator(name: str) -> Any:
    schema_text = resources.files("nmprops.schemas").joinpath(f"{name}.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _validate(doc: dict[str, Any], schema: str, source: Path | Traversable) -> None:
    validator = _load_schema_validator(schema)
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise TableValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc


def _settings_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "nmprops/settings", xdg_data / "nmprops/settings"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TableLoadError(f"Could not read table file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise TableValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise TableValidationError(f"Table file {path} must contain a mapping at root")
    return loaded


def _normalize_bool(value: Any, *, context: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise TableValidationError(f"{context} must be boolean true/false")


def _hook(table: dict[str, Any], name: str, *, context: str, what: str) -> Any:
    try:
        return table[name]
    except KeyError:
        allowed = ", ".join(sorted(table))
        raise TableValidationError(f"{context}: unknown {what} '{name}'. Allowed: {allowed}") from None


def _build_enums(doc: dict[str, Any], source: Path | Traversable) -> dict[str, EnumType]:
    _validate(doc, "enums", source)
    enums: dict[str, EnumType] = {}
    for name, spec in doc["types"].items():
        context = f"enum {name}"
        is_flags = _normalize_bool(spec["flags"], context=f"{context}.flags")
        values = tuple(
            EnumValue(value=entry["value"], nick=entry["nick"], label=entry.get("label"))
            for entry in spec["values"]
        )
        nicks = [entry.nick.lower() for entry in values]
        if len(set(nicks)) != len(nicks):
            raise TableValidationError(f"{context} has duplicate nicks in {source}")
        if is_flags and any(entry.value < 0 for entry in values):
            raise TableValidationError(f"{context}: flag values must not be negative")
        hex_numbers = None
        if "hex" in spec:
            hex_numbers = _normalize_bool(spec["hex"], context=f"{context}.hex")
        enums[name] = EnumType(
            name=name,
            is_flags=is_flags,
            values=values,
            aliases=dict(spec.get("aliases", {})),
            hex_numbers=hex_numbers,
        )
    return enums


def _build_composition(doc: dict[str, Any], source: Path | Traversable) -> CompositionTable:
    _validate(doc, "composition", source)

    def parts(entries: list[dict[str, Any]], context: str) -> tuple[ValidPart, ...]:
        return tuple(
            ValidPart(
                setting=entry["setting"],
                mandatory=_normalize_bool(entry["mandatory"], context=f"{context}.{entry['setting']}"),
            )
            for entry in entries
        )

    return CompositionTable(
        connection_types={
            name: parts(entries, name) for name, entries in doc["connection_types"].items()
        },
        no_slave_parts=parts(doc["no_slave_parts"], "no_slave_parts"),
        slave_types={
            name: SlaveParts(
                slave_setting=spec["slave_setting"],
                parts=parts(spec["parts"], f"slave_types.{name}"),
            )
            for name, spec in doc["slave_types"].items()
        },
    )


def _int_aliases(spec: dict[str, Any]) -> dict[int, str]:
    return {value: nick for nick, value in spec.get("aliases", {}).items()}


def _make_codec(
    spec: dict[str, Any],
    enums: dict[str, EnumType],
    *,
    context: str,
    default: Any = None,
) -> Codec:
    codec_type = spec["type"]
    extra: dict[str, Any] = {} if default is None else {"default": default}

    if codec_type == "bool":
        return BoolCodec(**extra)
    if codec_type == "int":
        check = None
        if "validator" in spec:
            check = _hook(hooks.INT_CHECKS, spec["validator"], context=context, what="integer check")
        return IntCodec(
            minimum=int(spec.get("min", -MAXINT32 - 1)),
            maximum=int(spec.get("max", MAXINT32)),
            base=int(spec.get("base", 10)),
            width=int(spec.get("width", 0)),
            aliases=_int_aliases(spec),
            alias_render=spec.get("alias_render", "pretty"),
            check=check,
            **extra,
        )
    if codec_type == "enum":
        enum_type = _hook(enums, spec["enum"], context=context, what="enum type")
        return EnumCodec(
            enum_type,
            parsable=spec.get("parsable", NUMERIC),
            pretty=spec.get("pretty", HYBRID),
            **extra,
        )
    if codec_type == "mac":
        return MacCodec(
            length=int(spec.get("length", ETH_ALEN)),
            cloned=_normalize_bool(spec.get("cloned", False), context=f"{context}.cloned"),
        )
    if codec_type == "ssid":
        return SsidCodec()
    if codec_type in ("certificate", "private-key"):
        return CertificateCodec(private_key=codec_type == "private-key")
    if codec_type == "bytes":
        return BytesCodec(legacy=_normalize_bool(spec.get("legacy", False), context=f"{context}.legacy"))
    if codec_type == "string":
        normalizer = None
        if "normalizer" in spec:
            normalizer = _hook(hooks.NORMALIZERS, spec["normalizer"], context=context, what="normalizer")
        return StringCodec(values=tuple(spec.get("values", ())), normalizer=normalizer, **extra)
    if codec_type == "file-text":
        kind = _hook(hooks.FILE_TEXT_KINDS, spec["kind"], context=context, what="file text kind")
        return FileTextCodec(**kind)
    if codec_type == "string-list":
        item_parser = None
        if "item" in spec:
            item_parser = _hook(hooks.ITEM_PARSERS, spec["item"], context=context, what="item parser")
        splitter = None
        item_renderer = None
        if "splitter" in spec:
            splitter = _hook(hooks.SPLITTERS, spec["splitter"], context=context, what="splitter")
            item_renderer = hooks.ITEM_RENDERERS.get(spec["splitter"])
        return string_list_codec(
            separators=spec.get("separators", " \t,"),
            values=tuple(spec.get("values", ())),
            item_parser=item_parser,
            item_renderer=item_renderer,
            splitter=splitter,
            dedupe=_normalize_bool(spec.get("dedupe", False), context=f"{context}.dedupe"),
            joiner=spec.get("joiner", ","),
        )
    if codec_type == "ip-address":
        return IPAddressCodec(int(spec["family"]))
    if codec_type == "ip-addresses":
        return ip_address_list_codec(int(spec["family"]))
    if codec_type == "ip-routes":
        return ip_route_list_codec(int(spec["family"]))
    if codec_type == "link-watchers":
        return link_watcher_list_codec()
    if codec_type == "priority-map":
        return priority_map_codec(spec["direction"])
    if codec_type == "dcb-array":
        return DcbArrayCodec(
            maximum=int(spec["max"]),
            other=int(spec.get("other", 0)),
            percent=_normalize_bool(spec.get("percent", False), context=f"{context}.percent"),
        )
    if codec_type == "option-map":
        keys = spec.get("keys", ())
        if isinstance(keys, str):
            keys = _hook(hooks.OPTION_KEYS, keys, context=context, what="option key set")
        value_validator = None
        if "validator" in spec:
            value_validator = _hook(hooks.VALUE_VALIDATORS, spec["validator"], context=context, what="validator")
        value_renderer = None
        if "renderer" in spec:
            value_renderer = _hook(hooks.VALUE_RENDERERS, spec["renderer"], context=context, what="renderer")
        return OptionMapCodec(
            valid_keys=tuple(keys),
            value_validator=value_validator,
            value_renderer=value_renderer,
            separator=spec.get("separator", "="),
            joiner=spec.get("joiner", ","),
        )
    raise TableValidationError(f"{context}: unsupported property type '{codec_type}'")


def _parse_default(codec: Codec, raw: Any, *, context: str) -> Any:
    # YAML integers are taken as numbers; a hex codec would misread their decimal text.
    if isinstance(raw, int) and isinstance(codec, IntCodec):
        if not codec.minimum <= raw <= codec.maximum:
            raise TableValidationError(
                f"{context}: default {raw} is out of range [{codec.minimum}, {codec.maximum}]"
            )
        return raw
    try:
        return codec.parse(str(raw))
    except PropertyError as exc:
        raise TableValidationError(f"{context}: invalid default: {exc}") from exc


def _build_codec(spec: dict[str, Any], enums: dict[str, EnumType], *, context: str) -> Codec:
    codec = _make_codec(spec, enums, context=context)
    if "default" in spec:
        default = _parse_default(codec, spec["default"], context=context)
        codec = _make_codec(spec, enums, context=context, default=default)
    return codec


def _build_setting(
    doc: dict[str, Any],
    enums: dict[str, EnumType],
    source: Path | Traversable,
) -> SettingInfo:
    _validate(doc, "setting", source)

    setting = doc["name"]
    properties: dict[str, PropertyDescriptor] = {}
    aliases: set[str] = set()
    for name, spec in doc["properties"].items():
        context = f"{setting}.{name}"
        codec = _build_codec(spec, enums, context=context)
        setter = None
        if "setter" in spec:
            setter = _hook(hooks.SETTERS, spec["setter"], context=context, what="setter")
        cli_alias = spec.get("cli_alias")
        if cli_alias is not None:
            if cli_alias in aliases or cli_alias in doc["properties"]:
                raise TableValidationError(f"{context}: CLI alias '{cli_alias}' is already in use")
            aliases.add(cli_alias)
        properties[name] = PropertyDescriptor(
            setting=setting,
            name=name,
            codec=codec,
            is_secret=_normalize_bool(spec.get("secret", False), context=f"{context}.secret"),
            is_required=_normalize_bool(spec.get("required", False), context=f"{context}.required"),
            is_cli_primary=_normalize_bool(spec.get("cli_primary", False), context=f"{context}.cli_primary"),
            cli_alias=cli_alias,
            values=tuple(spec.get("values", ())),
            describe=spec.get("describe"),
            default=codec.default(),
            enabled_by=spec.get("enabled_by"),
            setter=setter,
        )

    for descriptor in properties.values():
        if descriptor.enabled_by is None:
            continue
        flags = properties.get(descriptor.enabled_by)
        if flags is None or not isinstance(flags.codec, EnumCodec) or not flags.codec.enum_type.is_flags:
            raise TableValidationError(
                f"{setting}.{descriptor.name}: enabled_by '{descriptor.enabled_by}' "
                "must name a flags property of the same setting"
            )

    for name, spec in doc["properties"].items():
        if "setter" not in spec:
            continue
        for pattern in hooks.SETTER_SIBLINGS.get(spec["setter"], ()):
            sibling = pattern.format(name=name)
            if sibling not in properties:
                raise TableValidationError(
                    f"{setting}.{name}: setter '{spec['setter']}' needs property '{sibling}' in the same setting"
                )

    return SettingInfo(name=setting, title=doc["title"], properties=properties)


def _iter_packaged_setting_paths() -> list[Traversable]:
    settings_root = resources.files("nmprops.settings")
    return [item for item in settings_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_setting_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _settings_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_enums() -> dict[str, EnumType]:
    path = resources.files("nmprops.tables").joinpath("enums.yaml")
    return _build_enums(_read_yaml(path), path)


def load_composition() -> CompositionTable:
    path = resources.files("nmprops.tables").joinpath("composition.yaml")
    return _build_composition(_read_yaml(path), path)


def load_tables() -> LoadedTables:
    enums = load_enums()
    settings: dict[str, SettingInfo] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_setting_paths(), key=lambda p: p.name):
        info = _build_setting(_read_yaml(path), enums, path)
        settings[info.name] = info

    for path in _iter_user_setting_paths():
        info = _build_setting(_read_yaml(path), enums, path)
        if info.name in settings:
            warning = f"User setting table '{info.name}' overrides packaged table"
            LOGGER.warning(warning)
            warnings.append(warning)
        settings[info.name] = info

    return LoadedTables(
        settings=settings,
        enums=enums,
        composition=load_composition(),
        warnings=tuple(warnings),
    )
