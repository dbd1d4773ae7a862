"""Directive recognition.

A directive is a whole line of the form ``{name}`` or ``{name: value}``::

    {title: Amazing Grace}
    {start_of_chorus: label="Chorus 1"}
    {textfont-print: Times}

Names are lowercased and trimmed.  A name containing ``-`` is a conditional
directive: the part before the first ``-`` (the *base*) selects the handler
and the remainder (the *condition*) is recorded but never evaluated.
"""

import re
from dataclasses import dataclass, field

# {name} or {name:value}; name excludes ':' and '}', value excludes '}'
DIRECTIVE_RE = re.compile(r"^\{([^:}]+)(?::([^}]*))?\}$")

# key="val" or key='val' anywhere in a directive value
ATTRIBUTE_RE = re.compile(r"""([a-zA-Z0-9_-]+)=["']([^"']*)["']""")

# Signed digits at the start of a value: "3 semitones", "-2", "+1"
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class Directive:
    name: str  # full lowercased name, e.g. "textfont-print"
    value: str = ""
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def base(self) -> str:
        """Name used for dispatch: everything before the first ``-``."""
        return self.name.split("-", 1)[0]

    @property
    def condition(self) -> str | None:
        """Selector after the first ``-``, or None for plain directives."""
        if "-" not in self.name:
            return None
        return self.name.split("-", 1)[1]


def parse_attributes(value: str) -> dict[str, str]:
    """Return the ``key="val"`` pairs found in *value*.

    Values without ``=`` have no attributes.  Later duplicates win.
    """
    if "=" not in value:
        return {}
    return {m.group(1): m.group(2) for m in ATTRIBUTE_RE.finditer(value)}


def match_directive(line: str) -> Directive | None:
    """Return the :class:`Directive` on *line*, or None if it is not one."""
    m = DIRECTIVE_RE.match(line.strip())
    if not m:
        return None
    value = (m.group(2) or "").strip()
    return Directive(
        name=m.group(1).strip().lower(),
        value=value,
        attributes=parse_attributes(value),
    )


def parse_int(value: str) -> int | None:
    """Leading integer of *value* (``"3 semitones"`` → 3), or None."""
    m = LEADING_INT_RE.match(value)
    return int(m.group(1)) if m else None
