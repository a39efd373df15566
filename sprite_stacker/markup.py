"""
Stylesheet + demo page for a finished sprite sheet.
"""

from __future__ import annotations

import re
from html import escape
from typing import Dict, Iterable, Optional

from .catalog import PlacementCatalog

HTML_TEMPLATE = (
    '<!DOCTYPE html>\n'
    '<html><head><meta charset="utf-8"><title>{title}</title>\n'
    '{head}\n'
    '</head><body>\n'
    '{body}\n'
    '</body></html>\n'
)

_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


def class_name(name: str) -> str:
    """``home.png`` -> ``icon-home-png``; anything outside ``[A-Za-z0-9_-]`` becomes ``-``."""
    return "icon-" + _UNSAFE.sub("-", name)


def class_names(names: Iterable[str]) -> Dict[str, str]:
    """One distinct class per image name, in order.

    Names that sanitise to an already used class (``a.b.png`` / ``a-b.png``)
    get ``-2``, ``-3``, ... appended.
    """
    taken = set()
    out = {}
    for name in names:
        base = cls = class_name(name)
        n = 2
        while cls in taken:
            cls = f"{base}-{n}"
            n += 1
        taken.add(cls)
        out[name] = cls
    return out


def generate_css(catalog: PlacementCatalog, sprite_filename: str) -> str:
    classes = class_names(catalog.names())
    css = []

    css.append(".icon {")
    css.append(f"  background-image: url('{sprite_filename}');")
    css.append("  background-repeat: no-repeat;")
    css.append("  display: inline-block;")
    css.append("}\n")

    for name, p in catalog.entries():
        css.append(f".{classes[name]} {{")
        css.append(f"  background-position: left {-p.x}px top {-p.y}px;")
        css.append(f"  width: {p.width}px;")
        css.append(f"  height: {p.height}px;")
        css.append("}\n")

    return "\n".join(css)


def generate_demo(catalog: PlacementCatalog, sprite_filename: str,
                  css_href: Optional[str] = None) -> str:
    """HTML page showing every icon; links *css_href* or inlines the CSS."""
    if css_href is not None:
        head = f'<link rel="stylesheet" href="{escape(css_href)}">'
    else:
        head = '<style type="text/css">\n' + generate_css(catalog, sprite_filename) + "</style>"

    classes = class_names(catalog.names())
    divs = [f'<div class="icon {classes[name]}" title="{escape(name)}"></div>'
            for name in catalog.names()]
    return HTML_TEMPLATE.format(title=escape(sprite_filename), head=head, body="\n".join(divs))
