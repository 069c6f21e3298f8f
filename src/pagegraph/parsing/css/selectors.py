"""
Selector text helpers.

A selector is reduced to a sequence of simple-selector parts separated by
descendant combinators. Each part is broken into the fragments the
Selector Index understands: a tag name, an `#id` and `.class` names.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# First ':' not preceded by a backslash starts a pseudo-class / pseudo-element
PSEUDO_START = re.compile(r"(?<!\\):")
ATTRIBUTE_SELECTOR = re.compile(r"\[[^\]]*\]")
NON_DESCENDANT_COMBINATOR = re.compile(r"[>+~]")
TAG_PREFIX = re.compile(r"^([A-Za-z][A-Za-z0-9_-]*)")
FRAGMENT = re.compile(r"([#.])((?:\\.|[A-Za-z0-9_\-]|[^\x00-\x7f])+)")
ESCAPE = re.compile(r"\\(.)")


@dataclass(frozen=True)
class SelectorPart:
    """One whitespace-delimited token of a descendant-combinator selector."""
    text: str
    tag: Optional[str] = None
    element_id: Optional[str] = None
    classes: Tuple[str, ...] = field(default_factory=tuple)
    supported: bool = True

    def index_keys(self) -> List[str]:
        """Selector Index keys this part can resolve through."""
        keys: List[str] = []
        if self.tag:
            keys.append(self.tag)
        if self.element_id:
            keys.append(f"#{self.element_id}")
        keys.extend(f".{name}" for name in self.classes)
        return keys


def strip_pseudo(selector: str) -> str:
    match = PSEUDO_START.search(selector)
    if match:
        return selector[:match.start()]
    return selector


def split_selector(selector: str) -> List[str]:
    """Outermost ancestor first, target last."""
    return strip_pseudo(selector).split()


def parse_part(text: str) -> SelectorPart:
    body = ATTRIBUTE_SELECTOR.sub("", text)
    supported = NON_DESCENDANT_COMBINATOR.search(body) is None

    tag_match = TAG_PREFIX.match(body)
    tag = tag_match.group(1).lower() if tag_match else None

    element_id = None
    classes: List[str] = []
    for marker, raw in FRAGMENT.findall(body):
        name = ESCAPE.sub(r"\1", raw)
        if marker == "#":
            if element_id is None:
                element_id = name
        else:
            classes.append(name)

    return SelectorPart(
        text=text,
        tag=tag,
        element_id=element_id,
        classes=tuple(classes),
        supported=supported,
    )


def parse_selector(selector: str) -> List[SelectorPart]:
    return [parse_part(part) for part in split_selector(selector)]
