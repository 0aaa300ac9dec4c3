"""
Code generation utilities

Parses constructor parameter declarations and renders the equivalent
python source of each generated constructor, kept on the constructor as
``__source__`` for debugging.
"""

import ast
import numbers
import os
from dataclasses import dataclass
from typing import Optional

from ..errors import BindingError

# annotation name -> runtime check used by generated constructors
ANNOTATION_TYPES = {
    'int': numbers.Integral,
    'Integer': numbers.Integral,
    'float': numbers.Real,
    'Real': numbers.Real,
    'str': str,
    'bool': bool,
    'PathLike': (str, bytes, os.PathLike),
}


class CodeGen:
    """Code generation helper with indentation support"""

    def __init__(self):
        self._lines: list[str] = []
        self._indent: int = 0
        self._indent_str: str = '    '  # 4 spaces

    def line(self, text: str = ''):
        """Add a line with current indentation"""
        if text:
            self._lines.append(self._indent_str * self._indent + text)
        else:
            self._lines.append('')

    def lines(self, *texts: str):
        for text in texts:
            self.line(text)

    def block(self, header: str):
        """Context manager for an indented python block"""
        return _BlockContext(self, header)

    def output(self) -> str:
        return '\n'.join(self._lines) + '\n'


class _BlockContext:

    def __init__(self, gen: CodeGen, header: str):
        self._gen = gen
        self._header = header

    def __enter__(self):
        self._gen.line(self._header)
        self._gen._indent += 1
        return self

    def __exit__(self, *args):
        self._gen._indent -= 1


@dataclass
class Param:
    name: str
    annotation: Optional[str] = None


def parse_params(params) -> list:
    """
    Parses a constructor parameter declaration such as ``"w: int, h: int"``.
        Only plain positional names with optional annotations are allowed:
        defaults, ``*args`` and keyword-only parameters are rejected so
        the declared arity is the only accepted one.
    """
    if params is None:
        return []
    if isinstance(params, (list, tuple)):
        params = ', '.join(p if isinstance(p, str) else f'{p[0]}: {getattr(p[1], "__name__", p[1])}'
                           for p in params)
    try:
        tree = ast.parse(f'def _ctor({params}): pass')
    except SyntaxError as err:
        raise BindingError(f'malformed parameter list {params!r}: {err.msg}') from err
    args = tree.body[0].args
    if args.vararg or args.kwarg or args.kwonlyargs or args.posonlyargs:
        raise BindingError(f'constructor parameters must be plain positional names: {params!r}')
    if args.defaults:
        raise BindingError(f'constructor parameters may not have defaults: {params!r}')
    parsed = []
    for arg in args.args:
        if arg.arg in ('cls', 'self') or arg.arg.startswith('_'):
            raise BindingError(f'reserved parameter name {arg.arg!r}')
        annotation = None
        if arg.annotation is not None:
            annotation = ast.unparse(arg.annotation)
            if annotation not in ANNOTATION_TYPES:
                raise BindingError(f'unsupported annotation {annotation!r} for {arg.arg!r}')
        parsed.append(Param(arg.arg, annotation))
    return parsed


def constructor_source(func_name: str, params: list, cxxtemplate: str, shared: bool) -> str:
    """
    Source of a constructor ``func_name(cls, *params)`` that resolves the
        wrapper's native type, forwards the arguments positionally and
        wraps the result.
    """
    gen = CodeGen()
    arglist = ''.join(f', {p.name}' for p in params)
    with gen.block(f'def {func_name}(cls{arglist}):'):
        for p in params:
            if p.annotation is not None:
                with gen.block(f'if not _check({p.name}, {p.annotation!r}):'):
                    gen.line(f'raise TypeError(f"{{cls.__name__}}: {p.name} must be {p.annotation}, '
                             f'got {{type({p.name}).__name__}}")')
        gen.line(f'native_ctor = _native_constructor(cls, {cxxtemplate!r})')
        gen.line(f"obj = native_ctor({', '.join(p.name for p in params)})")
        if shared:
            gen.line('return _SharedPtr(obj, _deleter(obj))')
        else:
            gen.line('return obj')
    return gen.output()


def check_annotation(value, annotation):
    expected = ANNOTATION_TYPES[annotation]
    if annotation in ('int', 'Integer') and isinstance(value, bool):
        return False
    return isinstance(value, expected)
