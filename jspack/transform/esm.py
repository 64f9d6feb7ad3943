"""Tree-sitter powered ES module to require/exports transformer."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from ..errors import ParseError
from .base import TransformResult, Transformer

JS_LANGUAGE = Language(tree_sitter_javascript.language())

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_BLOCK_DECLARATION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
    "lexical_declaration",
}

_FUNCTION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
}

_NAMED_VALUE_TYPES = {"function_expression", "function", "generator_function", "class"}


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def _name_text(node: Node, source: bytes) -> str:
    """Text of an identifier or string module export name, without quotes."""
    text = _text(node, source)
    if node.type == "string":
        return text[1:-1]
    return text


def _member(obj: str, name: str) -> str:
    if _IDENTIFIER.match(name):
        return f"{obj}.{name}"
    return f"{obj}[{json.dumps(name)}]"


def _getter(name: str, expression: str) -> str:
    return (
        f"Object.defineProperty(exports, {json.dumps(name)}, "
        f"{{ enumerable: true, get: function () {{ return {expression}; }} }});"
    )


def _binding_names(node: Node, source: bytes) -> Iterator[str]:
    """Yield every identifier bound by a declarator name or destructuring pattern."""
    if node.type in {"identifier", "shorthand_property_identifier_pattern"}:
        yield _text(node, source)
        return
    if node.type == "pair_pattern":
        value = node.child_by_field_name("value")
        if value is not None:
            yield from _binding_names(value, source)
        return
    if node.type in {"assignment_pattern", "object_assignment_pattern"}:
        left = node.child_by_field_name("left")
        if left is not None:
            yield from _binding_names(left, source)
        return
    for child in node.named_children:
        yield from _binding_names(child, source)


def _declared_names(declaration: Node, source: bytes) -> List[str]:
    if declaration.type in {"lexical_declaration", "variable_declaration"}:
        names: List[str] = []
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            target = declarator.child_by_field_name("name")
            if target is not None:
                names.extend(_binding_names(target, source))
        return names
    name_node = declaration.child_by_field_name("name")
    return [_text(name_node, source)] if name_node is not None else []


def _hoisted_var_names(body: Node, source: bytes) -> Set[str]:
    """Names declared with ``var`` anywhere in a function body, excluding nested functions."""
    names: Set[str] = set()
    stack = list(body.named_children)
    while stack:
        node = stack.pop()
        if node.type in _FUNCTION_TYPES:
            continue
        if node.type == "variable_declaration":
            names.update(_declared_names(node, source))
        stack.extend(node.named_children)
    return names


def _scope_names(node: Node, source: bytes) -> Set[str]:
    """Names a scope-creating node binds for its own subtree."""
    names: Set[str] = set()
    if node.type in _FUNCTION_TYPES:
        for field_name in ("parameters", "parameter"):
            params = node.child_by_field_name(field_name)
            if params is not None:
                names.update(_binding_names(params, source))
        if node.type in {"function_expression", "function", "generator_function"}:
            own_name = node.child_by_field_name("name")
            if own_name is not None:
                names.add(_text(own_name, source))
        body = node.child_by_field_name("body")
        if body is not None:
            names.update(_hoisted_var_names(body, source))
    elif node.type == "statement_block":
        for child in node.named_children:
            if child.type in _BLOCK_DECLARATION_TYPES:
                names.update(_declared_names(child, source))
    elif node.type == "for_statement":
        initializer = node.child_by_field_name("initializer")
        if initializer is not None and initializer.type == "lexical_declaration":
            names.update(_declared_names(initializer, source))
    elif node.type == "for_in_statement":
        if any(child.type in {"let", "const", "var"} for child in node.children):
            left = node.child_by_field_name("left")
            if left is not None:
                names.update(_binding_names(left, source))
    elif node.type == "catch_clause":
        parameter = node.child_by_field_name("parameter")
        if parameter is not None:
            names.update(_binding_names(parameter, source))
    return names


def _is_callee(node: Node) -> bool:
    parent = node.parent
    if parent is None or parent.type != "call_expression":
        return False
    callee = parent.child_by_field_name("function")
    return (
        callee is not None
        and callee.start_byte == node.start_byte
        and callee.end_byte == node.end_byte
    )


def _is_removed_statement(node: Node) -> bool:
    if node.type == "import_statement":
        return True
    if node.type != "export_statement":
        return False
    if node.child_by_field_name("source") is not None:
        return True
    return any(child.type == "export_clause" for child in node.named_children)


def _error_nodes(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            yield node
            continue
        if node.has_error:
            stack.extend(reversed(node.children))


class _ModuleRewrite:
    """Collects byte-range edits, hoisted requires and export getters for one module.

    Imported names are not copied into locals. Every reference to one is
    rewritten into a member access on the module's ``require`` result, so
    reads see the exporter's current value even across import cycles.
    """

    def __init__(self, source: bytes) -> None:
        self._source = source
        self._edits: List[Tuple[int, int, str]] = []
        self._preamble: List[str] = []
        self._requires: List[str] = []
        self._imported: Dict[str, str] = {}
        self._counter = 0
        self.imports: List[str] = []
        self.has_exports = False

    def _binding(self, specifier: str) -> str:
        name = f"__jspack_import_{self._counter}__"
        self._counter += 1
        self.imports.append(specifier)
        self._requires.append(f"var {name} = require({json.dumps(specifier)});")
        return name

    def _remove(self, node: Node) -> None:
        self._edits.append((node.start_byte, node.end_byte, ""))

    def _export(self, name: str, expression: str) -> None:
        self.has_exports = True
        self._preamble.append(_getter(name, expression))

    def import_statement(self, node: Node) -> None:
        source_node = node.child_by_field_name("source")
        binding = self._binding(_name_text(source_node, self._source))
        self._remove(node)

        clause = next((child for child in node.named_children if child.type == "import_clause"), None)
        for child in clause.named_children if clause is not None else ():
            if child.type == "identifier":
                self._imported[_text(child, self._source)] = f"{binding}.default"
            elif child.type == "namespace_import":
                local = next(c for c in child.named_children if c.type == "identifier")
                self._imported[_text(local, self._source)] = binding
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type != "import_specifier":
                        continue
                    name_node = spec.child_by_field_name("name")
                    alias_node = spec.child_by_field_name("alias")
                    local = _text(alias_node or name_node, self._source)
                    imported = _name_text(name_node, self._source)
                    self._imported[local] = _member(binding, imported)

    def reexport_statement(self, node: Node) -> None:
        source_node = node.child_by_field_name("source")
        binding = self._binding(_name_text(source_node, self._source))
        self._remove(node)
        clause = None
        namespace = None
        for child in node.named_children:
            if child.type == "export_clause":
                clause = child
            elif child.type == "namespace_export":
                namespace = child

        if clause is not None:
            for name, exported in self._export_specifiers(clause):
                self._export(exported, _member(binding, name))
        elif namespace is not None:
            alias = namespace.named_children[-1]
            self._export(_name_text(alias, self._source), binding)
        else:
            self.has_exports = True
            self._requires.append(
                f"Object.keys({binding}).forEach(function (key) {{"
                ' if (key === "default" || key === "__esModule") return;'
                " if (Object.prototype.hasOwnProperty.call(exports, key)) return;"
                " Object.defineProperty(exports, key, { enumerable: true,"
                f" get: function () {{ return {binding}[key]; }} }}); }});"
            )

    def export_statement(self, node: Node) -> None:
        is_default = any(child.type == "default" for child in node.children)
        declaration = node.child_by_field_name("declaration")
        value = node.child_by_field_name("value")

        if declaration is not None:
            self._edits.append((node.start_byte, declaration.start_byte, ""))
            names = _declared_names(declaration, self._source)
            if is_default:
                if names:
                    self._export("default", names[0])
                return
            for name in names:
                self._export(name, name)
            return

        if value is not None:
            name_node = value.child_by_field_name("name") if value.type in _NAMED_VALUE_TYPES else None
            if name_node is not None:
                # A named function or class keeps its local binding.
                self._edits.append((node.start_byte, value.start_byte, ""))
                self._export("default", _text(name_node, self._source))
                return
            self.has_exports = True
            self._edits.append((node.start_byte, value.start_byte, "exports.default = "))
            return

        clause = next((child for child in node.named_children if child.type == "export_clause"), None)
        for name, exported in self._export_specifiers(clause):
            self._export(exported, self._imported.get(name, name))
        self._remove(node)

    def _export_specifiers(self, clause: Optional[Node]) -> Iterable[Tuple[str, str]]:
        if clause is None:
            return
        for spec in clause.named_children:
            if spec.type != "export_specifier":
                continue
            name_node = spec.child_by_field_name("name")
            alias_node = spec.child_by_field_name("alias")
            name = _name_text(name_node, self._source)
            exported = _name_text(alias_node, self._source) if alias_node is not None else name
            yield name, exported

    def rewrite_references(self, root: Node) -> None:
        """Point every unshadowed use of an imported name at its live binding."""
        if not self._imported:
            return
        tracked = frozenset(self._imported)
        stack: List[Tuple[Node, FrozenSet[str]]] = [
            (child, frozenset()) for child in root.children if not _is_removed_statement(child)
        ]
        while stack:
            node, shadowed = stack.pop()
            if node.type in {"identifier", "shorthand_property_identifier"}:
                name = _text(node, self._source)
                if name in tracked and name not in shadowed:
                    self._edits.append(
                        (node.start_byte, node.end_byte, self._reference(node, name))
                    )
                continue
            declared = _scope_names(node, self._source) & tracked
            if declared:
                shadowed = shadowed | declared
            stack.extend((child, shadowed) for child in node.children)

    def _reference(self, node: Node, name: str) -> str:
        expression = self._imported[name]
        if node.type == "shorthand_property_identifier":
            return f"{name}: {expression}"
        if _is_callee(node):
            # Call without the exporting module as ``this``.
            return f"(0, {expression})"
        return expression

    def render(self) -> str:
        out = bytearray()
        cursor = 0
        for start, end, text in sorted(self._edits, key=lambda edit: edit[0]):
            out += self._source[cursor:start]
            out += text.encode("utf-8")
            cursor = end
        out += self._source[cursor:]

        header = ['"use strict";']
        if self.has_exports:
            header.append('Object.defineProperty(exports, "__esModule", { value: true });')
        header.extend(self._preamble)
        header.extend(self._requires)
        return "\n".join(header) + "\n" + out.decode("utf-8")


class EsmTransformer(Transformer):
    """Parses ES modules with tree-sitter and rewrites import/export syntax."""

    def __init__(self) -> None:
        self._parser = Parser(JS_LANGUAGE)

    def transform(self, source: str, path: Optional[Path] = None) -> TransformResult:
        source_bytes = source.encode("utf-8")
        tree = self._parser.parse(source_bytes)
        root = tree.root_node
        if root.has_error:
            raise self._syntax_error(root, path)

        rewrite = _ModuleRewrite(source_bytes)
        # Imports first, so export lists can refer to imported names declared later.
        for node in root.named_children:
            if node.type == "import_statement":
                rewrite.import_statement(node)
            elif node.type == "export_statement" and node.child_by_field_name("source") is not None:
                rewrite.reexport_statement(node)
        for node in root.named_children:
            if node.type == "export_statement" and node.child_by_field_name("source") is None:
                rewrite.export_statement(node)
        rewrite.rewrite_references(root)
        return TransformResult(code=rewrite.render(), imports=rewrite.imports)

    @staticmethod
    def _syntax_error(root: Node, path: Optional[Path]) -> ParseError:
        node = next(_error_nodes(root), root)
        row, column = node.start_point[0], node.start_point[1]
        message = f"missing {node.type}" if node.is_missing else "unexpected syntax"
        return ParseError(message, path=path, line=row + 1, column=column + 1)


__all__ = ["EsmTransformer", "JS_LANGUAGE"]
