"""Multi-format rendering: JSON, Rails-style XML, YAML with symbol keys, plain text.

A single strategy keyed on the Format enum; routes decide the format once
(extension, ?format=, Accept header, else JSON) and hand a plain value here.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

import yaml
from fastapi import Request, Response
from fastapi.responses import JSONResponse


class Format(str, Enum):
    json = "json"
    xml = "xml"
    yaml = "yaml"
    text = "text"


MEDIA_TYPES = {
    Format.json: "application/json",
    Format.xml: "application/xml",
    Format.yaml: "application/x-yaml",
    Format.text: "text/plain; charset=utf-8",
}

EXTENSIONS = {
    ".json": Format.json,
    ".xml": Format.xml,
    ".yaml": Format.yaml,
    ".yml": Format.yaml,
    ".txt": Format.text,
    ".text": Format.text,
}

ACCEPT_TYPES = {
    "application/json": Format.json,
    "application/xml": Format.xml,
    "text/xml": Format.xml,
    "application/x-yaml": Format.yaml,
    "application/yaml": Format.yaml,
    "text/yaml": Format.yaml,
    "text/x-yaml": Format.yaml,
    "text/plain": Format.text,
}

ALL_FORMATS = tuple(Format)

# Ranked above every known type, these leave the choice to the server
NO_PREFERENCE = {"*/*", "text/html", "application/xhtml+xml"}

# Characters XML 1.0 cannot carry, even escaped
_XML_INVALID = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def split_format_suffix(identifier: str, allowed: Iterable[Format] = ALL_FORMATS) -> Tuple[str, Optional[Format]]:
    """Strip the longest known extension from identifier.

    Returns (identifier, None) unchanged when no allowed extension matches
    or when stripping would leave nothing.
    """
    allowed = set(allowed)
    for ext in sorted(EXTENSIONS, key=len, reverse=True):
        fmt = EXTENSIONS[ext]
        if fmt in allowed and identifier.endswith(ext) and len(identifier) > len(ext):
            return identifier[: -len(ext)], fmt
    return identifier, None


def _accept_preferences(header: str) -> List[str]:
    """Media types from an Accept header, highest q first, list order kept on ties.
    Entries with q=0 are dropped.
    """
    ranked = []
    for index, part in enumerate(header.split(",")):
        params = part.split(";")
        media = params[0].strip().lower()
        if not media:
            continue
        q = 1.0
        for param in params[1:]:
            key, _, val = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    q = float(val.strip())
                except ValueError:
                    q = 0.0
        if q > 0:
            ranked.append((-q, index, media))
    return [media for _, _, media in sorted(ranked)]


def negotiate(request: Request, explicit: Optional[Format] = None, allowed: Iterable[Format] = ALL_FORMATS) -> Format:
    allowed = tuple(allowed)
    if explicit is not None and explicit in allowed:
        return explicit
    query_fmt = (request.query_params.get("format") or "").strip().lower()
    if query_fmt:
        _, fmt = split_format_suffix(f"_.{query_fmt}", allowed)
        if fmt is not None:
            return fmt
    for media in _accept_preferences(request.headers.get("accept", "")):
        if media in NO_PREFERENCE:
            break
        fmt = ACCEPT_TYPES.get(media)
        if fmt is not None and fmt in allowed:
            return fmt
    return Format.json


# XML

def _dasherize(key: str) -> str:
    return str(key).replace("_", "-")


def _singular(tag: str) -> str:
    return tag[:-1] if len(tag) > 1 and tag.endswith("s") else tag


def _fill(elem: ET.Element, value: Any) -> None:
    if value is None:
        elem.set("nil", "true")
    elif isinstance(value, bool):
        elem.set("type", "boolean")
        elem.text = "true" if value else "false"
    elif isinstance(value, int):
        elem.set("type", "integer")
        elem.text = _XML_INVALID.sub("", str(value))
    elif isinstance(value, float):
        elem.set("type", "float")
        elem.text = repr(value)
    elif isinstance(value, dict):
        for k, v in value.items():
            _fill(ET.SubElement(elem, _dasherize(k)), v)
    elif isinstance(value, (list, tuple)):
        elem.set("type", "array")
        child_tag = _singular(elem.tag)
        for item in value:
            _fill(ET.SubElement(elem, child_tag), item)
    else:
        elem.text = str(value)


def to_xml(value: Any, root: Optional[str] = None) -> str:
    if root is None:
        root = "objects" if isinstance(value, (list, tuple)) else "hash"
    elem = ET.Element(_dasherize(root))
    _fill(elem, value)
    ET.indent(elem, space="  ")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(elem, encoding="unicode") + "\n"


# YAML

def to_yaml(value: Any) -> str:
    # Ruby clients load ":key" mapping keys as symbols
    if isinstance(value, dict):
        value = {f":{k}": v for k, v in value.items()}
    return yaml.safe_dump(value, explicit_start=True, default_flow_style=False, sort_keys=False)


def render(value: Any, fmt: Format, *, root: Optional[str] = None, status_code: int = 200) -> Response:
    if fmt is Format.xml:
        body = to_xml(value, root)
    elif fmt is Format.yaml:
        body = to_yaml(value)
    elif fmt is Format.text and not isinstance(value, (dict, list, tuple)):
        body = str(value)
    else:
        # Text has no structured form; records fall back to JSON
        return JSONResponse(content=value, status_code=status_code)
    return Response(content=body, status_code=status_code, media_type=MEDIA_TYPES[fmt])
