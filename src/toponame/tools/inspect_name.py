"""Decode the provenance recorded in mapped element names.

Example
-------
python -m toponame.tools.inspect_name "Face6;:M2;FUS;:H1:8,F"

Names given as text are split into base and postfix at the first ``;``.  Each
name is decoded with :mod:`toponame.tag_codec`; the report lists base and
postfix, the tag, the element type, the part of the name preceding the
operation and the element it resolves to when that part is a plain
``Kind[index]`` key.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from ..mapped_name import MappedName
from ..postfix import ELEMENT_MAP_PREFIX
from ..tag_codec import TagCodec, TagCodecConfig

logger = logging.getLogger(__name__)

PROMPT = "name> "


class InspectError(RuntimeError):
    """Raised when the inspection tool cannot run."""


def parse_name(text: Union[str, MappedName]) -> MappedName:
    """Build a name from *text*, taking everything from the first ``;`` as postfix."""

    if isinstance(text, MappedName):
        return text.copy()
    name = MappedName(text)
    boundary = name.find(ELEMENT_MAP_PREFIX)
    if boundary <= 0:
        return name
    return MappedName.with_postfix(MappedName.slice_of(name, 0, boundary), name[boundary:].to_bytes())


def describe(text: Union[str, MappedName], codec: TagCodec) -> Dict[str, Any]:
    """Return a JSON-friendly record describing *text*.

    ``postfix`` is the postfix of the name itself; ``segment`` is the text from
    the decoded tag segment to the end.
    """

    name = parse_name(text)
    record: Dict[str, Any] = {
        "name": name.to_string(),
        "base": name.name(),
        "postfix": name.postfix(),
        "found": False,
    }
    info = codec.decode(name)
    if info is None:
        logger.info("No tag segment in %r", record["name"])
        return record

    source = MappedName.slice_of(name, 0, info.length)
    element = source.to_indexed_name()
    record.update(
        found=True,
        tag=info.tag,
        type=info.type,
        length=info.length,
        position=info.position,
        segment=info.postfix,
        generation="hex" if info.hex else "decimal",
        source=source.to_string(),
        element=str(element) if element is not None else None,
    )
    return record


def render(records: Sequence[Dict[str, Any]], output_format: str = "table") -> str:
    if output_format == "json":
        return json.dumps(list(records), indent=2)
    if output_format != "table":
        raise ValueError(f"Unsupported output format {output_format!r}")

    lines: List[str] = []
    for record in records:
        lines.append(record["name"])
        if record["postfix"]:
            lines.append(f"  base:       {record['base']}")
            lines.append(f"  postfix:    {record['postfix']}")
        if not record["found"]:
            lines.append("  no tag")
            continue
        lines.append(f"  tag:        {record['tag']}")
        lines.append(f"  type:       {record['type']}")
        lines.append(f"  length:     {record['length']} ({record['source']})")
        lines.append(f"  position:   {record['position']} ({record['segment']})")
        lines.append(f"  generation: {record['generation']}")
        if record["element"] is not None:
            lines.append(f"  element:    {record['element']}")
    return "\n".join(lines)


def run_interactive(
    codec: TagCodec,
    *,
    output_format: str = "table",
    session_factory: Optional[Callable[[], Any]] = None,
) -> None:
    """Decode names typed at a prompt until end of input."""

    if session_factory is None:
        try:
            from prompt_toolkit import PromptSession
        except ImportError as exc:
            raise InspectError(
                "prompt_toolkit is required for --interactive. Install it with"
                " `pip install prompt_toolkit`."
            ) from exc
        session_factory = PromptSession

    session = session_factory()
    while True:
        try:
            line = session.prompt(PROMPT)
        except KeyboardInterrupt:
            continue
        except EOFError:
            break
        line = line.strip()
        if not line:
            continue
        print(render([describe(line, codec)], output_format))


def _env_flag(name: str) -> bool:
    value = os.environ.get(name)
    if value is None:
        return False
    return value.lower() not in {"", "0", "false", "no"}


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Decode the tag segments carried by mapped element names",
    )
    parser.add_argument("names", nargs="*", help="Mapped names to decode")
    parser.add_argument(
        "--negative",
        action="store_true",
        help="Report negative tags with their sign",
    )
    parser.add_argument(
        "--no-recursive",
        dest="recursive",
        action="store_false",
        help="Do not walk back through zero-tag segments",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=("table", "json"),
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Read names from an interactive prompt",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Enable informational logging (or set TOPONAME_VERBOSE=1)",
    )
    args = parser.parse_args([] if argv is None else list(argv))

    if args.verbose is None:
        args.verbose = _env_flag("TOPONAME_VERBOSE")
    if not args.interactive and not args.names:
        parser.error("at least one name is required unless --interactive is supplied")
    return args


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = _parse_args(list(argv) if argv is not None else sys.argv[1:])
    if args.verbose and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)

    codec = TagCodec(TagCodecConfig(negative=args.negative, recursive=args.recursive))
    try:
        if args.interactive:
            run_interactive(codec, output_format=args.output_format)
            return 0
        print(render([describe(text, codec) for text in args.names], args.output_format))
    except InspectError as exc:
        print(f"inspect_name: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
