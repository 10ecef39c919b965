"""AST utilities and import collection for code generation.

This module provides helper functions for building Python AST nodes
and utilities for collecting and organizing imports during code generation.
Every helper fills in all list fields of the node it builds, so the result
unparses on every supported interpreter.
"""

import ast
import sys
from collections.abc import Iterable

__all__ = [
    # AST helpers
    '_name',
    '_const',
    '_attr',
    '_subscript',
    '_argument',
    '_assign',
    '_call',
    '_keyword',
    '_func',
    '_class',
    '_docstring',
    '_return',
    '_expr',
    '_if',
    '_fstring',
    '_dict',
    '_tuple',
    '_all',
    # Import collection
    'ImportCollector',
]


def _name(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _const(value) -> ast.Constant:
    return ast.Constant(value=value)


def _attr(value: str | ast.expr, attr: str) -> ast.Attribute:
    return ast.Attribute(
        value=_name(value) if isinstance(value, str) else value,
        attr=attr,
        ctx=ast.Load(),
    )


def _subscript(value: str | ast.expr, inner: ast.expr) -> ast.Subscript:
    return ast.Subscript(
        value=_name(value) if isinstance(value, str) else value,
        slice=inner,
        ctx=ast.Load(),
    )


def _argument(name: str, annotation: ast.expr | None = None) -> ast.arg:
    return ast.arg(
        arg=name,
        annotation=annotation,
    )


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    # Ensure target has Store context
    if isinstance(target, ast.Name):
        target = ast.Name(id=target.id, ctx=ast.Store())
    elif isinstance(target, (ast.Attribute, ast.Subscript)):
        target.ctx = ast.Store()
    return ast.Assign(
        targets=[target],
        value=value,
    )


def _call(
    func: ast.expr,
    args: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
) -> ast.Call:
    return ast.Call(
        func=func,
        args=args or [],
        keywords=keywords or [],
    )


def _keyword(arg: str | None, value: ast.expr) -> ast.keyword:
    return ast.keyword(arg=arg, value=value)


def _func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
    defaults: list[ast.expr] | None = None,
    kwonlyargs: list[ast.arg] | None = None,
    kw_defaults: list[ast.expr] | None = None,
) -> ast.FunctionDef:
    return ast.FunctionDef(
        name=name,
        args=ast.arguments(
            posonlyargs=[],
            args=args,
            vararg=None,
            kwarg=None,
            kwonlyargs=kwonlyargs or [],
            kw_defaults=kw_defaults or [],
            defaults=defaults or [],
        ),
        body=body,
        decorator_list=[],
        returns=returns,
    )


def _class(
    name: str, bases: list[ast.expr], body: list[ast.stmt]
) -> ast.ClassDef:
    return ast.ClassDef(
        name=name,
        bases=bases,
        keywords=[],
        body=body,
        decorator_list=[],
    )


def _docstring(text: str, indent: int = 0) -> ast.Expr:
    """Build a docstring statement.

    ``indent`` is the nesting depth in spaces; continuation lines and the
    closing quotes of a multi-line docstring are indented to match it.
    """
    if indent and '\n' in text:
        pad = ' ' * indent
        lines = text.split('\n')
        text = '\n'.join([lines[0]] + [pad + line if line else '' for line in lines[1:]])
        if text.endswith('\n'):
            text += pad
    return ast.Expr(value=_const(text))


def _return(value: ast.expr | None) -> ast.Return:
    return ast.Return(value=value)


def _expr(value: ast.expr) -> ast.Expr:
    return ast.Expr(value=value)


def _if(
    test: ast.expr, body: list[ast.stmt], orelse: list[ast.stmt] | None = None
) -> ast.If:
    return ast.If(test=test, body=body, orelse=orelse or [])


def _fstring(*parts: str | ast.expr | tuple[ast.expr, str]) -> ast.JoinedStr:
    """Build an f-string from literal text and expressions.

    A ``(expr, 'r')`` tuple formats the expression with ``!r``.
    """
    values: list[ast.expr] = []
    for part in parts:
        if isinstance(part, str):
            values.append(_const(part))
        elif isinstance(part, tuple):
            expr, conversion = part
            values.append(
                ast.FormattedValue(value=expr, conversion=ord(conversion), format_spec=None)
            )
        else:
            values.append(ast.FormattedValue(value=part, conversion=-1, format_spec=None))
    return ast.JoinedStr(values=values)


def _dict(items: Iterable[tuple[ast.expr | None, ast.expr]]) -> ast.Dict:
    """Build a dict display; a ``None`` key unpacks the value with ``**``."""
    keys, values = [], []
    for key, value in items:
        keys.append(key)
        values.append(value)
    return ast.Dict(keys=keys, values=values)


def _tuple(elts: list[ast.expr]) -> ast.Tuple:
    return ast.Tuple(elts=elts, ctx=ast.Load())


def _all(names: Iterable[str]) -> ast.Assign:
    return _assign(
        target=_name('__all__'),
        value=_tuple([_const(name) for name in names]),
    )


# =============================================================================
# Import Collection
# =============================================================================


class ImportCollector:
    """Collects and manages imports for generated Python code.

    This class provides a centralized way to collect imports from various
    sources during code generation and convert them to AST import statements.
    It automatically deduplicates imports and sorts them for consistent output.

    Example:
        >>> collector = ImportCollector()
        >>> collector.add_module('logging')
        >>> collector.add_imports({'httpx': {'Client', 'Response'}})
        >>> collector.add_import('.config', 'api_config')
        >>> imports = collector.to_ast()
        >>> # import logging / from httpx import Client, Response / from .config import api_config
    """

    def __init__(self):
        """Initialize an empty import collector."""
        self._imports: dict[str, set[str]] = {}
        self._modules: set[str] = set()

    def add_imports(self, imports: dict[str, Iterable[str]]) -> None:
        """Add imports from a dictionary mapping modules to names.

        Args:
            imports: Dictionary mapping module names to imported names.
                    Example: {'httpx': {'Client'}, '.config': {'api_config'}}
        """
        for module, names in imports.items():
            if module not in self._imports:
                self._imports[module] = set()
            self._imports[module].update(names)

    def add_import(self, module: str, name: str) -> None:
        """Add a single ``from module import name``."""
        if module not in self._imports:
            self._imports[module] = set()
        self._imports[module].add(name)

    def add_module(self, module: str) -> None:
        """Add a plain ``import module``."""
        self._modules.add(module)

    def _get_import_category(self, module: str) -> int:
        """Get the sort category for a module.

        Uses sys.stdlib_module_names to dynamically detect standard library modules.

        Returns:
            0 for standard library, 1 for third-party, 2 for local/relative imports.
        """
        if module.startswith('.'):
            return 2  # Local/relative imports

        base_module = module.split('.')[0]
        if base_module in sys.stdlib_module_names:
            return 0  # Standard library

        return 1  # Third-party

    def to_ast(self) -> list[ast.Import | ast.ImportFrom]:
        """Convert collected imports to AST import statements.

        Imports are sorted according to Python conventions:
        1. Standard library imports
        2. Third-party imports
        3. Local/relative imports

        Within each category plain imports come first, then ``from`` imports,
        each sorted alphabetically by module name. Names within each import
        are also sorted alphabetically.

        Returns:
            List of ast.Import and ast.ImportFrom statements, properly sorted.
        """
        entries = [(module, None) for module in self._modules]
        entries.extend(self._imports.items())
        entries.sort(
            key=lambda x: (self._get_import_category(x[0]), x[1] is not None, x[0])
        )

        import_stmts: list[ast.Import | ast.ImportFrom] = []
        for module, names in entries:
            if names is None:
                import_stmts.append(ast.Import(names=[ast.alias(name=module, asname=None)]))
                continue

            # Determine the level for relative imports
            if module.startswith('.'):
                level = len(module) - len(module.lstrip('.'))
                import_module = module.lstrip('.') or None
            else:
                level = 0
                import_module = module

            aliases = []
            for name in sorted(names):
                # 'request as _request' imports under an alias
                name, _, asname = name.partition(' as ')
                aliases.append(ast.alias(name=name, asname=asname or None))

            import_stmts.append(
                ast.ImportFrom(module=import_module, names=aliases, level=level)
            )
        return import_stmts

    def has_imports(self) -> bool:
        return bool(self._imports or self._modules)
