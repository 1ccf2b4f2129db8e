"""Type descriptors as written in the documentation tables.

Handles primitives (``long``), containers (``List[Foo]``, ``Set[string]``,
``Map[String, List[Bar]]``) and bare DTO names.
"""

import re

from pydantic import BaseModel

PRIMITIVES = {"string", "int", "integer", "long", "float", "double", "boolean", "bool", "object", "void"}

CONTAINER_ARITY = {"list": 1, "set": 1, "map": 2}

_NAME = re.compile(r"\s*([A-Za-z_][\w.]*)\s*")

# "int (optional)"
_ANNOTATION = re.compile(r"\s*\([^)]*\)\s*$")


class TypeRef(BaseModel):
    """Parsed type descriptor."""

    kind: str  # primitive / list / set / map / dto
    name: str
    args: list["TypeRef"] = []


def parse_type(raw: str) -> TypeRef:
    """Parse a doc type string. Raises ValueError on malformed input."""
    text = _ANNOTATION.sub("", raw.strip()).replace("<", "[").replace(">", "]")
    node, pos = _parse(text, 0)
    if text[pos:].strip():
        raise ValueError(f"Unexpected trailing text in type {raw!r}")
    return node


def referenced_dtos(raw: str) -> list[str]:
    """DTO names referenced anywhere in a type string, in order."""
    names: list[str] = []
    _collect(parse_type(raw), names)
    return names


def _collect(node: TypeRef, names: list[str]) -> None:
    if node.kind == "dto":
        if node.name not in names:
            names.append(node.name)
        return
    for arg in node.args:
        _collect(arg, names)


def _parse(text: str, pos: int) -> tuple[TypeRef, int]:
    match = _NAME.match(text, pos)
    if not match:
        raise ValueError(f"Expected type name at {pos} in {text!r}")
    name = match.group(1)
    pos = match.end()

    args: list[TypeRef] = []
    if text.startswith("[]", pos):
        # Foo[] shorthand
        return TypeRef(kind="list", name="List", args=[_leaf(name)]), pos + 2
    if pos < len(text) and text[pos] == "[":
        pos += 1
        while True:
            arg, pos = _parse(text, pos)
            args.append(arg)
            if pos >= len(text):
                raise ValueError(f"Unclosed bracket in {text!r}")
            if text[pos] == ",":
                pos += 1
                continue
            if text[pos] == "]":
                pos += 1
                break
            raise ValueError(f"Unexpected {text[pos]!r} at {pos} in {text!r}")
        while pos < len(text) and text[pos] == " ":
            pos += 1

    if not args:
        return _leaf(name), pos

    kind = name.lower()
    if CONTAINER_ARITY.get(kind) != len(args):
        raise ValueError(f"Bad container type {name} with {len(args)} argument(s)")
    return TypeRef(kind=kind, name=name, args=args), pos


def _leaf(name: str) -> TypeRef:
    if name.lower() in PRIMITIVES:
        return TypeRef(kind="primitive", name=name.lower())
    return TypeRef(kind="dto", name=name)
