"""
Useful things to parse the directive lines of DTX / GDA files

A directive is a line starting with "#", the key and value are separated by
the first colon, or by the first whitespace if there is no colon :
  - #TITLE: Some Song
  - #BPM 150
  - #00113: 00130013
"""

from typing import Any, List, Optional, Tuple

from parsimonious import Grammar, NodeVisitor, ParseError
from parsimonious.nodes import Node

SUPPORTED_HEADERS = {
    "; Created by DTXCreator 024",
    "; Created by DTXCreator 025(verK)",
    "; Created by DTXCreator 020",
    ";Created by GDA Creator Professional Ver.0.10",
    ";Created by GDA Creator Professional Ver.0.22",
}

directive_grammar = Grammar(
    r"""
    line            = ws "#" directive
    directive       = colon_separated / space_separated / key_only
    colon_separated = colon_key ":" value
    colon_key       = ~r"[^:]*"
    space_separated = space_key ~r"\s" value
    space_key       = ~r"\S*"
    key_only        = ~r".*"
    value           = ~r".*"
    ws              = ~r"[\t \u3000]*"
    """
)


class DirectiveVisitor(NodeVisitor):

    """Returns a (key, value) tuple"""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.key: Optional[str] = None
        self.value = ""

    def visit_line(self, node: Node, visited_children: List[Node]) -> Tuple[str, str]:
        if self.key is None:
            raise ValueError("No key found after parsing directive")
        return self.key, self.value

    def visit_colon_key(self, node: Node, visited_children: List[Node]) -> None:
        self.key = node.text.strip()

    visit_space_key = visit_colon_key
    visit_key_only = visit_colon_key

    def visit_value(self, node: Node, visited_children: List[Node]) -> None:
        self.value = node.text.strip()

    def generic_visit(self, node: Node, visited_children: List[Node]) -> None:
        ...


def is_directive(line: str) -> bool:
    return line.strip().startswith("#")


def parse_directive(line: str) -> Tuple[str, str]:
    try:
        tree = directive_grammar.parse(line.strip())
    except ParseError:
        raise ParseError(f"Could not parse {line!r} as a directive") from None
    return DirectiveVisitor().visit(tree)  # type: ignore


def is_supported_header(line: str) -> bool:
    return line.strip().lstrip("\ufeff").strip() in SUPPORTED_HEADERS
