"""
Parsing and rendering of C++ type names

Native objects are looked up by their C++ spelling, e.g.
``pcl::PointCloud<pcl::PointXYZ>`` or ``std::vector<double>``. Wrapper
templates carry ``$T`` placeholders that are substituted once the wrapper
is specialized.
"""

import ast
import re
from dataclasses import dataclass, field

from ..errors import BindingError

PLACEHOLDER_RE = re.compile(r'\$(?:\((?P<paren>[A-Za-z_]\w*)\)|(?P<bare>[A-Za-z_]\w*))')
_NAME_RE = re.compile(r'[A-Za-z_][\w:]*(?:\s+[A-Za-z_]\w*)*')
_NUMBER_RE = re.compile(r'-?\d+(?:\.\d*)?(?:[eE][-+]?\d+)?[fFuUlL]*')


@dataclass(frozen=True)
class CxxType:
    """A parsed C++ type: qualified name plus template arguments"""
    name: str
    args: tuple = field(default=())

    @property
    def is_template(self) -> bool:
        return len(self.args) > 0

    def __str__(self):
        if not self.args:
            return self.name
        inner = ','.join(str(arg) for arg in self.args)
        return f'{self.name}<{inner}>'


def placeholders(template: str) -> list:
    """Names of all ``$T``/``$(T)`` placeholders in order of appearance"""
    return [m.group('paren') or m.group('bare') for m in PLACEHOLDER_RE.finditer(template)]


def template_string(cxxname: str, type_params) -> str:
    """Builds ``name<$T,$U>`` from a bare C++ name and the wrapper's type parameters"""
    if not type_params:
        return cxxname
    esc_params = [f'${param}' for param in type_params]
    return f"{cxxname}<{','.join(esc_params)}>"


def check_placeholders(template: str, type_params):
    """
    Verifies that a template string and a parameter list agree.
        Every declared parameter must appear and every placeholder must
        be declared; raised at definition time, never per call.
    """
    found = placeholders(template)
    missing = [param for param in type_params if param not in found]
    unknown = [name for name in found if name not in type_params]
    if unknown:
        raise BindingError(f'template {template!r} uses undeclared parameters {unknown}')
    if missing:
        raise BindingError(f'template {template!r} has no placeholder for {missing}')


def substitute(template: str, mapping: dict) -> str:
    def _replace(match):
        key = match.group('paren') or match.group('bare')
        if key not in mapping:
            raise BindingError(f'no substitution for ${key} in {template!r}')
        return str(mapping[key])
    return PLACEHOLDER_RE.sub(_replace, template)


class _Parser:

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def _skip_ws(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self):
        self._skip_ws()
        return self.text[self.pos] if self.pos < len(self.text) else ''

    def parse(self) -> CxxType:
        result = self._type()
        if self._peek():
            raise BindingError(f'unexpected {self.text[self.pos:]!r} in type name {self.text!r}')
        return result

    def _type(self):
        self._skip_ws()
        if '$' == self._peek():
            raise BindingError(f'unsubstituted placeholder in type name {self.text!r}')
        number = _NUMBER_RE.match(self.text, self.pos)
        if number:
            self.pos = number.end()
            return CxxType(number.group(0))
        match = _NAME_RE.match(self.text, self.pos)
        if match is None:
            raise BindingError(f'expected a type name at {self.pos} in {self.text!r}')
        self.pos = match.end()
        name = ' '.join(match.group(0).split())
        args = []
        if self._peek() == '<':
            self.pos += 1
            if self._peek() == '>':
                raise BindingError(f'empty template argument list in {self.text!r}')
            while True:
                args.append(self._type())
                nxt = self._peek()
                self.pos += 1
                if nxt == '>':
                    break
                if nxt != ',':
                    raise BindingError(f'unbalanced template brackets in {self.text!r}')
        return CxxType(name, tuple(args))


def parse_cxx_type(text: str) -> CxxType:
    if not isinstance(text, str) or not text.strip():
        raise BindingError(f'invalid C++ type name {text!r}')
    return _Parser(text).parse()


def split_args(text: str) -> list:
    """Splits a constructor argument string at top-level commas"""
    parts, depth, current = [], 0, ''
    for char in text:
        if char in '<([{':
            depth += 1
        elif char in '>)]}':
            depth -= 1
        if char == ',' and depth == 0:
            parts.append(current.strip())
            current = ''
        else:
            current += char
    if current.strip():
        parts.append(current.strip())
    return parts


def parse_args(text):
    """
    Evaluates a native constructor argument string such as ``"10"`` or
        ``"0, 1, 0.5f"`` into python literals.
    """
    if text is None:
        return []
    values = []
    for part in split_args(text):
        literal = part.rstrip('fFuUlL') if _NUMBER_RE.fullmatch(part) else part
        try:
            values.append(ast.literal_eval(literal))
        except (ValueError, SyntaxError) as err:
            raise BindingError(f'cannot forward argument {part!r}: {err}') from err
    return values
