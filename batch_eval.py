#!/usr/bin/env python3
"""
batch_eval.py - Evaluate field templates over a batch of messages

A CLI tool that loads a batch of messages from a JSON file and evaluates
either a single template or every dynamic field of a component config for
each message, printing one JSON line per message.

Exit status:
    0 - every message evaluated
    1 - at least one message failed to evaluate
    2 - the template or component config could not be built
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from fieldexpr.config import ConfigLoader, MessageLoader, build_field
from fieldexpr.errors import ConfigError
from fieldexpr.rendering import ComponentRenderer, MessageRenderer
from fieldexpr.template import to_string


def build_renderer(args: argparse.Namespace) -> MessageRenderer:
    """Build the renderer for a --template or a --config/--component pair."""
    if args.template is not None:
        field = build_field("result", {"template": args.template, "type": args.type})
        return MessageRenderer({"result": field})

    if not args.component:
        raise ConfigError("--component is required with --config")
    return ComponentRenderer(ConfigLoader(args.config)).renderer_for(args.component)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Evaluate field templates for every message of a batch"
    )
    parser.add_argument("messages_file", help="Path to a JSON array or JSON Lines file of messages")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("-t", "--template", help="Template to evaluate, e.g. \"topic/${!meta('id')}\"")
    source.add_argument("-c", "--config", help="Directory holding component configs")
    parser.add_argument("-n", "--component", help="Component config name (with --config)")
    parser.add_argument(
        "--type",
        default="auto",
        choices=["auto", "string", "int", "bool", "float"],
        help="Result type for --template (default: auto)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        batch = MessageLoader.load_batch(args.messages_file)
        renderer = build_renderer(args)
    except (ConfigError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    failed = 0
    for result in renderer.render_batch(batch):
        if not result.ok:
            failed += 1
        print(json.dumps(result.to_dict(), default=to_string))

    if failed:
        print(f"{failed} of {len(batch)} message(s) failed", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
