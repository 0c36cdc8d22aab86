# common/template_utils.py
# -*- coding: utf-8 -*-
"""
Minimal ``{{KEY}}`` placeholder substitution for generated config files.

Placeholders without a value are left in place so a partially rendered file
still shows which values are missing.
"""

import re
from pathlib import Path
from typing import List, Mapping, Union

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")


def render_template(template_text: str, replacements: Mapping[str, str]) -> str:
    """
    Replace every ``{{KEY}}`` whose key is in `replacements`.

    Keys are matched literally and values are inserted verbatim. Unknown
    placeholders are kept and unused keys are ignored.
    """
    if not replacements:
        return template_text
    # Single pass, so substituted values are never rescanned for placeholders.
    pattern = re.compile(
        "|".join(re.escape("{{" + key + "}}") for key in replacements)
    )
    return pattern.sub(
        lambda match: str(replacements[match.group(0)[2:-2]]), template_text
    )


def render_template_file(
    template_path: Union[str, Path], replacements: Mapping[str, str]
) -> str:
    """Read a UTF-8 template from disk and render it."""
    template_text = Path(template_path).read_text(encoding="utf-8")
    return render_template(template_text, replacements)


def find_unresolved_placeholders(text: str) -> List[str]:
    """Return the distinct placeholder keys still present in `text`, in order."""
    seen: List[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(text):
        if match.group(1) not in seen:
            seen.append(match.group(1))
    return seen
