"""
Wrapper generation for native PCL types.

``defpcltype`` builds, for one native class (template), a shared pointer
wrapper ``<Name>Ptr`` and a value wrapper ``<Name>Val``; the pointer
wrapper is the preferred representation. ``defptrconstructor`` and
``defconstructor`` then attach constructors with a fixed positional
signature to either variant:

```python
PointCloudPtr, PointCloudVal = defpcltype("PointCloud", "pcl::PointCloud", params=("T",))
PointCloud = PointCloudPtr
defptrconstructor(PointCloud, "", "pcl::PointCloud")
defptrconstructor(PointCloud, "w: int, h: int", "pcl::PointCloud")

cloud = PointCloud[PointXYZ](2, 3)
```

All validation (type names, template placeholders, duplicate arities)
happens here, when the wrappers are generated.
"""

import sys
from collections import namedtuple
from logging import getLogger

from .. import native
from ..errors import BindingError
from ..native.cxxtypes import (
    check_placeholders,
    parse_args,
    parse_cxx_type,
    placeholders,
    substitute,
    template_string,
)
from ..native.smart_ptr import SharedPtr
from .codegen import check_annotation, constructor_source, parse_params
from .wrappers import (
    PCLWrapper,
    SharedWrapper,
    ValueWrapper,
    cxx_name_of,
    deleter_for,
    native_constructor,
)

log = getLogger(__name__)


class TypeFamily(namedtuple('TypeFamily', ['ptr', 'val'])):
    """The wrappers generated for one native type"""

    __slots__ = ()

    @property
    def preferred(self):
        return self.ptr


def _check_template(cxxtemplate, type_params):
    check_placeholders(cxxtemplate, type_params)
    # dummy arguments so the bracket structure can be checked before specialization
    parse_cxx_type(substitute(cxxtemplate, {p: f'_{p}' for p in type_params}))


def _full_template(cxxname, type_params):
    if placeholders(cxxname):
        return cxxname
    return template_string(cxxname, type_params)


def defpcltype(name, cxxname, params=(), bases=(), module=None) -> TypeFamily:
    """
    Defines wrapper types for a native type

    Args:
        name (str): python name, e.g. ``"PointCloud"``
        cxxname (str): C++ name, e.g. ``"pcl::PointCloud"``; explicit
            ``$T`` placeholders may be used instead of appending ``<$T>``
        params (tuple, optional): template parameter names. Defaults to ().
        bases (tuple, optional): extra base classes shared by both wrappers
            (method mixins or a common abstract base). Defaults to ().
        module (str, optional): module the classes are reported to live in.
            Defaults to the caller's module.

    Returns:
        TypeFamily: ``(ptr, val)``; ``ptr`` is the preferred alias
    """
    if not isinstance(name, str) or not name.isidentifier():
        raise BindingError(f'invalid wrapper name {name!r}')
    type_params = tuple(params)
    for param in type_params:
        if not isinstance(param, str) or not param.isidentifier():
            raise BindingError(f'invalid type parameter {param!r} for {name}')
    if len(set(type_params)) != len(type_params):
        raise BindingError(f'duplicate type parameters {type_params} for {name}')
    cxxtemplate = _full_template(cxxname, type_params)
    _check_template(cxxtemplate, type_params)
    if not type_params:
        native.resolve(cxxtemplate)
    if module is None:
        module = sys._getframe(1).f_globals.get('__name__', '__main__')

    def _namespace(doc):
        return {
            '_cxxtemplate': cxxtemplate,
            '_type_params': type_params,
            '_type_args': None,
            '_constructors': {},
            '_specializations': {},
            '_native_ctors': {},
            '__module__': module,
            '__doc__': doc,
        }

    ptr_name, val_name = f'{name}Ptr', f'{name}Val'
    ptr = type(SharedWrapper)(ptr_name, (*bases, SharedWrapper), _namespace(
        f'Pointer representation for `{cxxtemplate}`'))
    val = type(ValueWrapper)(val_name, (*bases, ValueWrapper), _namespace(
        f'Value representation for `{cxxtemplate}`'))
    log.debug(f'defined {ptr_name} and {val_name} for {cxxtemplate}')
    return TypeFamily(ptr, val)


def _root(cls):
    for klass in cls.__mro__:
        if '_constructors' in klass.__dict__:
            return klass
    raise BindingError(f'{cls!r} was not generated by defpcltype')


def register_constructor(cls, params, func):
    """
    Attaches ``func(cls, *args) -> handle`` as the constructor of ``cls``
        for the arity of ``params``.
    """
    if not (isinstance(cls, type) and issubclass(cls, PCLWrapper)):
        raise BindingError(f'{cls!r} is not a wrapper type')
    root = _root(cls)
    if root is not cls:
        raise BindingError(f'constructors must be declared on {root.__name__}, not on {cls.__name__}')
    parsed = parse_params(params)
    arity = len(parsed)
    if arity in cls._constructors:
        raise BindingError(f'{cls.__name__} already has a constructor taking {arity} arguments')
    cls._constructors[arity] = func
    return func


def _make_constructor(func_name, params, cxxtemplate, shared):
    """
    Constructor ``func(cls, *args)`` checking the declared annotations,
        forwarding the arguments positionally to the native type and
        wrapping the result.
    """
    arity = len(params)

    def constructor(cls, *args):
        if len(args) != arity:
            raise TypeError(f'{cls.__name__} constructor takes {arity} arguments, got {len(args)}')
        for param, value in zip(params, args):
            if param.annotation is not None and not check_annotation(value, param.annotation):
                raise TypeError(f'{cls.__name__}: {param.name} must be {param.annotation}, '
                                f'got {type(value).__name__}')
        obj = native_constructor(cls, cxxtemplate)(*args)
        if shared:
            return SharedPtr(obj, deleter_for(obj))
        return obj

    constructor.__name__ = constructor.__qualname__ = func_name
    return constructor


def _defconstructor_impl(cls, params, cxxname, is_sharedptr):
    if not (isinstance(cls, type) and issubclass(cls, PCLWrapper)):
        raise BindingError(f'{cls!r} is not a wrapper type')
    if is_sharedptr and not issubclass(cls, SharedWrapper):
        raise BindingError(f'{cls.__name__} is a value wrapper, use defconstructor')
    if not is_sharedptr and not issubclass(cls, ValueWrapper):
        raise BindingError(f'{cls.__name__} is a shared pointer wrapper, use defptrconstructor')
    root = _root(cls)
    if root is not cls:
        raise BindingError(f'constructors must be declared on {root.__name__}, not on {cls.__name__}')

    parsed = parse_params(params)
    cxxtemplate = _full_template(cxxname, cls._type_params) if cxxname else cls._cxxtemplate
    _check_template(cxxtemplate, cls._type_params)

    func_name = f'_new_{cls.__name__}_{len(parsed)}'
    func = _make_constructor(func_name, parsed, cxxtemplate, is_sharedptr)
    func.__source__ = constructor_source(func_name, parsed, cxxtemplate, is_sharedptr)
    func.cxxtemplate = cxxtemplate
    log.debug(f'generated constructor for {cls.__name__}:\n{func.__source__}')
    return register_constructor(cls, [f'{p.name}: {p.annotation}' if p.annotation else p.name
                                      for p in parsed], func)


def defptrconstructor(cls, params='', cxxname=None):
    """
    Defines a constructor of a shared pointer wrapper

    Args:
        cls (type): a ``<Name>Ptr`` class from ``defpcltype``
        params (str): positional parameters, e.g. ``"w: int, h: int"``
        cxxname (str, optional): native type to construct. Defaults to the
            wrapper's own native type.

    Example:
        ``defptrconstructor(PointCloud, "", "pcl::PointCloud")``
    """
    return _defconstructor_impl(cls, params, cxxname, True)


def defconstructor(cls, params='', cxxname=None):
    """
    Defines a constructor of a value wrapper

    Example:
        ``defconstructor(CorrespondenceVal, "index_query, index_match, distance", "pcl::Correspondence")``
    """
    return _defconstructor_impl(cls, params, cxxname, False)


def boost_shared_ptr(name, args=None, **type_args):
    """
    Creates a shared pointer of any registered native type (for package
        development). ``args`` is either a native argument string such as
        ``"10"`` or a sequence of python values; ``$T`` placeholders in
        ``name`` are filled from ``type_args``.

    Returns:
        SharedPtr: a new owner of the constructed native object

    Example:
        ``v = boost_shared_ptr("std::vector<double>", "10")``
    """
    if type_args:
        name = substitute(name, {k: cxx_name_of(v) for k, v in type_args.items()})
    ctor = native.resolve(name)
    values = parse_args(args) if isinstance(args, str) or args is None else list(args)
    obj = ctor(*values)
    return SharedPtr(obj, deleter_for(obj))
