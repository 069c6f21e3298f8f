"""
Style Resolver for pagegraph.

Applies stylesheet rules to the element tree. Only selector membership is
computed; cascade, specificity and overriding are out of scope.

For every selector of every rule:
1. strip the pseudo suffix and split into descendant parts,
2. resolve the rightmost part into candidate ids through the Selector
   Index (union of the tag, #id and .class hits),
3. keep a candidate only if, walking up the containment tree, an ancestor
   matching each part to the left is found in order,
4. link the stylesheet to each surviving candidate with a
   `stylesheet-use` edge labelled with the selector text.

Must run after the Markup Tree Walker has produced every containment edge.
"""

import logging
from typing import List, Optional, Set

from tree_sitter import Parser

from ...core.exceptions import StylesheetParseError
from ...core.graph import AnalysisContext
from ...core.types import EdgeKind
from ..base import create_parser
from .parser import StyleRule, parse_stylesheet
from .selectors import SelectorPart, parse_selector

logger = logging.getLogger(__name__)


class StyleResolver:
    """Resolves selectors against the element tree of one analysis run."""

    def __init__(self, context: AnalysisContext):
        self.context = context
        self._parser: Optional[Parser] = None

    def resolve(self, stylesheet_id: int, text: str) -> bool:
        """
        Parse stylesheet text and link its rules to matching elements.

        Returns False when the text failed to parse; the stylesheet node
        stays in the graph without edges.
        """
        rules = self.load_rules(stylesheet_id, text)
        if rules is None:
            return False
        self.apply(stylesheet_id, rules)
        return True

    def load_rules(self, stylesheet_id: int, text: str) -> Optional[List[StyleRule]]:
        """Parse stylesheet text, recording a failure against the stylesheet node."""
        if self._parser is None:
            self._parser = create_parser("css")
        try:
            rules = parse_stylesheet(text, self._parser)
        except StylesheetParseError as e:
            logger.warning(f"Stylesheet node {stylesheet_id} not applied: {e}")
            self.context.record_issue(stylesheet_id, str(e))
            return None
        logger.debug(f"Stylesheet node {stylesheet_id}: {len(rules)} rules")
        return rules

    def apply(self, stylesheet_id: int, rules: List[StyleRule]) -> int:
        """Create stylesheet-use edges for already-parsed rules; returns the edge count."""
        created = 0
        for rule in rules:
            for selector in rule.selectors:
                for target in self.match(selector):
                    self.context.store.create_edge(
                        stylesheet_id, target, EdgeKind.STYLESHEET_USE, selector
                    )
                    created += 1
        return created

    def match(self, selector: str) -> List[int]:
        """Element ids matched by a selector, in ascending id order."""
        parts = parse_selector(selector)
        if not parts:
            return []
        if not all(part.supported for part in parts):
            logger.debug(f"Unsupported combinator in selector {selector!r}, skipped")
            return []

        candidates = self.candidates(parts[-1])
        if len(parts) == 1:
            return sorted(candidates)

        ancestor_sets = [self.candidates(part) for part in parts[:-1]]
        return sorted(c for c in candidates if self._has_ancestor_chain(c, ancestor_sets))

    def candidates(self, part: SelectorPart) -> Set[int]:
        """Union of the index hits for every fragment of a part."""
        found: Set[int] = set()
        for key in part.index_keys():
            node_id = self.context.selectors.resolve(key)
            if node_id is not None:
                found.add(node_id)
        return found

    def _has_ancestor_chain(self, node_id: int, ancestor_sets: List[Set[int]]) -> bool:
        """Check the parts left of the target, nearest first, walking upward."""
        current = node_id
        for wanted in reversed(ancestor_sets):
            if not wanted:
                return False
            for ancestor in self.context.store.ancestors_of(current):
                if ancestor in wanted:
                    current = ancestor
                    break
            else:
                return False
        return True
