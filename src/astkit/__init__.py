"""Primitives for reasoning about and transforming JavaScript syntax trees."""
from __future__ import annotations

from .collection import Collection, query
from .equivalence import EquivalenceMatcher, equivalent, equivalent_to
from .errors import AstkitError, KindMismatch, MalformedNode, UnknownKind
from .helpers import append_comment, negate, pretty_print, summarise
from .builders import build_nested_member_expression
from .lexer import LexError
from .matching import call_expression_matching
from .parser import ParseError, parse
from .paths import NodePath, Scope
from .printer import PrintOptions, print_node
from .registry import KindRegistry, assertion_for, build_registry, default_registry, predicate_for
from .scope import closest_shared_scope, identifiers_in_same_scope, nodes_of_kind_in_scope
from .tree import Comment

__all__ = [
    "AstkitError",
    "Collection",
    "Comment",
    "EquivalenceMatcher",
    "KindMismatch",
    "KindRegistry",
    "LexError",
    "MalformedNode",
    "NodePath",
    "ParseError",
    "PrintOptions",
    "Scope",
    "UnknownKind",
    "append_comment",
    "assertion_for",
    "build_nested_member_expression",
    "build_registry",
    "call_expression_matching",
    "closest_shared_scope",
    "default_registry",
    "equivalent",
    "equivalent_to",
    "identifiers_in_same_scope",
    "negate",
    "nodes_of_kind_in_scope",
    "parse",
    "predicate_for",
    "pretty_print",
    "print_node",
    "query",
    "summarise",
]
