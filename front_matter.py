#!/usr/bin/env python3
"""
Front-matter blocks for example pages.

Every page the site generator picks up starts with a YAML block delimited by
'---' lines. The keys are read by the site generator only; nothing in this
repository interprets them beyond rendering and linting.
"""
import argparse
import json
import sys
from dataclasses import dataclass, fields
from typing import Optional

import yaml

DELIMITER = "---"
REQUIRED_KEYS = ("name", "language", "suite", "order")
ARRANGEMENTS = ("horizontal", "vertical")


@dataclass
class FrontMatter:
    name: str
    language: str
    suite: str
    order: int
    plot_url: Optional[str] = None
    sitemap: Optional[bool] = None
    arrangement: Optional[str] = None
    # Notebook pages only
    title: Optional[str] = None
    description: Optional[str] = None
    permalink: Optional[str] = None
    has_thumbnail: Optional[bool] = None
    thumbnail: Optional[str] = None
    page_type: Optional[str] = None
    display_as: Optional[str] = None
    ipynb: Optional[str] = None

    def to_dict(self) -> dict:
        """Keys in declaration order, unset values dropped."""
        return {f.name: getattr(self, f.name) for f in fields(self)
                if getattr(self, f.name) is not None}


def render_front_matter(meta) -> str:
    """Renders a FrontMatter (or plain dict) as a '---' delimited YAML block."""
    data = meta.to_dict() if isinstance(meta, FrontMatter) else dict(meta)
    body = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)
    return f"{DELIMITER}\n{body}{DELIMITER}\n"


def parse_front_matter(text: str):
    """
    Splits a page into (metadata, body).
    A page without a leading block is returned untouched with empty metadata.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != DELIMITER:
        return {}, text

    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == DELIMITER:
            break
    else:
        raise ValueError("Front matter block is not terminated by '---'.")

    data = yaml.safe_load("".join(lines[1:end])) or {}
    if not isinstance(data, dict):
        raise ValueError("Front matter must be a mapping of keys to values.")
    return data, "".join(lines[end + 1:])


def check_front_matter(meta) -> list:
    """Returns a list of lint problems; empty when the block is well-formed."""
    data = meta.to_dict() if isinstance(meta, FrontMatter) else dict(meta)
    problems = []

    for key in REQUIRED_KEYS:
        if data.get(key) in (None, ""):
            problems.append(f"missing required key '{key}'")

    order = data.get("order")
    # bool is an int subclass; 'order: true' is still a mistake
    if order is not None and (isinstance(order, bool) or not isinstance(order, int)):
        problems.append(f"'order' must be an integer, got {order!r}")

    for key in ("sitemap", "has_thumbnail"):
        if key in data and not isinstance(data[key], bool):
            problems.append(f"'{key}' must be true or false, got {data[key]!r}")

    arrangement = data.get("arrangement")
    if arrangement is not None and arrangement not in ARRANGEMENTS:
        problems.append(f"'arrangement' must be one of {ARRANGEMENTS}, got {arrangement!r}")

    return problems


def main():
    parser = argparse.ArgumentParser(description="Lint the front matter of example pages.")
    parser.add_argument("pages", nargs="+", help="Page files to check.")
    args = parser.parse_args()

    failed = False
    for page in args.pages:
        try:
            with open(page, 'r', encoding='utf-8') as f:
                meta, _ = parse_front_matter(f.read())
        except FileNotFoundError:
            print(f"Error: The file '{page}' was not found.", file=sys.stderr)
            failed = True
            continue
        except (ValueError, yaml.YAMLError) as e:
            print(f"{page}: unreadable front matter: {e}", file=sys.stderr)
            failed = True
            continue

        problems = check_front_matter(meta)
        if problems:
            failed = True
            print(f"{page}:")
            for problem in problems:
                print(f"  - {problem}")
        else:
            print(f"{page}: OK")
            print(json.dumps(meta, indent=2, default=str))

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
