"""
Base classes for generated wrapper types and the handle accessors that
work on any of them.
"""

import copy as _copy
from logging import getLogger

from .. import native
from ..errors import BindingError, NullHandleError
from ..native.cxxtypes import substitute
from ..native.point_types import PointType
from ..native.smart_ptr import SharedPtr

log = getLogger(__name__)


def cxx_name_of(arg):
    """C++ spelling of a type argument: point types, scalar names or wrapper classes"""
    if isinstance(arg, PointType):
        return arg.cxxname
    if isinstance(arg, str):
        return arg
    if isinstance(arg, type) and issubclass(arg, PCLWrapper):
        return arg.cxxname
    raise BindingError(f'{arg!r} cannot be used as a template argument')


def deleter_for(obj):
    """Unbound ``destroy`` of the native class, called with the object by the last owner"""
    return getattr(type(obj), 'destroy', None)


def clone_native(obj):
    if hasattr(obj, 'clone'):
        return obj.clone()
    return _copy.deepcopy(obj)


def native_constructor(cls, cxxtemplate):
    """Resolves (and caches on ``cls``) the native constructor for a template string"""
    cache = cls.__dict__.get('_native_ctors')
    if cache is None:
        cache = {}
        cls._native_ctors = cache
    ctor = cache.get(cxxtemplate)
    if ctor is None:
        mapping = dict(zip(cls._type_params, map(cxx_name_of, cls._type_args or ())))
        cxxname = substitute(cxxtemplate, mapping)
        ctor = cache[cxxtemplate] = native.resolve(cxxname)
    return ctor


class _WrapperMeta(type):

    @property
    def cxxname(cls):
        if cls._type_params and cls._type_args is None:
            return cls._cxxtemplate
        mapping = dict(zip(cls._type_params, map(cxx_name_of, cls._type_args or ())))
        return substitute(cls._cxxtemplate, mapping)

    @property
    def is_generic(cls):
        return bool(cls._type_params) and cls._type_args is None


class PCLWrapper(metaclass=_WrapperMeta):
    """
    Common base of generated wrappers. Subclasses hold exactly one native
        handle in ``handle`` and are built by positional constructors
        registered per arity.
    """

    shared = None
    _cxxtemplate = None
    _type_params = ()
    _type_args = None
    _constructors = {}
    _specializations = {}
    _native_ctors = {}

    def __init__(self, *args):
        cls = type(self)
        if cls.is_generic:
            params = ', '.join(cls._type_params)
            raise TypeError(f'{cls.__name__} is generic, specialize it first: {cls.__name__}[{params}](...)')
        ctor = cls._constructors.get(len(args))
        if ctor is None:
            declared = sorted(cls._constructors)
            raise TypeError(f'{cls.__name__} has no constructor taking {len(args)} arguments '
                            f'(declared arities: {declared})')
        self.handle = ctor(cls, *args)

    def __class_getitem__(cls, type_args):
        if not isinstance(type_args, tuple):
            type_args = (type_args,)
        if not cls._type_params:
            raise TypeError(f'{cls.__name__} takes no type parameters')
        if cls._type_args is not None:
            raise TypeError(f'{cls.__name__} is already specialized')
        if len(type_args) != len(cls._type_params):
            raise TypeError(f'{cls.__name__} takes {len(cls._type_params)} type parameters, got {len(type_args)}')
        cached = cls._specializations.get(type_args)
        if cached is not None:
            return cached
        arg_names = ','.join(getattr(a, 'name', None) or getattr(a, '__name__', None) or str(a)
                             for a in type_args)
        specialized = type(cls)(f'{cls.__name__}[{arg_names}]', (cls,), {
            '_type_args': type_args,
            '_native_ctors': {},
            '__module__': cls.__module__,
            '__doc__': cls.__doc__,
        })
        # the generic wrapper must map onto a real native type
        native.resolve(specialized.cxxname)
        log.debug(f'specialized {cls.__name__} as {specialized.cxxname}')
        cls._specializations[type_args] = specialized
        return specialized

    @classmethod
    def from_handle(cls, handle):
        """
        Wraps an existing native handle. Generic wrappers are specialized
            from the template arguments of the held native object.
        """
        if cls.is_generic:
            obj = handle.get() if isinstance(handle, SharedPtr) else handle
            if obj is None:
                raise NullHandleError(f'cannot infer the type parameters of {cls.__name__} from a null handle')
            cls = cls[tuple(obj.template_args)]
        self = cls.__new__(cls)
        self.handle = handle
        return self

    @classmethod
    def eltype(cls):
        if cls._type_args is None:
            raise TypeError(f'{cls.__name__} is not specialized')
        return cls._type_args[0] if len(cls._type_args) == 1 else cls._type_args

    def __repr__(self):
        return f'{type(self).__name__}({type(self).cxxname})'


class SharedWrapper(PCLWrapper):
    """Holds a SharedPtr; copies alias the same native object"""

    shared = True

    def __copy__(self):
        ptr = handle(self)
        if not ptr:
            raise NullHandleError(f'{type(self).__name__} handle is null (released or moved)')
        return type(self).from_handle(ptr.copy())

    def __deepcopy__(self, memo):
        obj = clone_native(deref(self))
        return type(self).from_handle(SharedPtr(obj, deleter_for(obj)))


class ValueWrapper(PCLWrapper):
    """Holds the native object itself; copies duplicate the native storage"""

    shared = False

    def __copy__(self):
        return type(self).from_handle(clone_native(deref(self)))

    def __deepcopy__(self, memo):
        return self.__copy__()


def handle(x):
    """The native handle held by a wrapper (a SharedPtr or the native object)"""
    try:
        return x.handle
    except AttributeError:
        raise NullHandleError(f'{type(x).__name__} holds no handle') from None


def deref(x):
    """
    The native object behind a wrapper or SharedPtr.

    Raises:
        NullHandleError: the handle was released, moved out or is empty
    """
    if isinstance(x, SharedPtr):
        obj = x.get()
    elif isinstance(x, SharedWrapper):
        obj = handle(x).get()
    elif isinstance(x, ValueWrapper):
        obj = handle(x)
    else:
        raise TypeError(f'expected a wrapper or SharedPtr, got {type(x).__name__}')
    if obj is None:
        raise NullHandleError(f'{type(x).__name__} handle is null (released or moved)')
    return obj


def use_count(x) -> int:
    """Number of shared owners of the native object"""
    if isinstance(x, SharedPtr):
        return x.use_count()
    if isinstance(x, SharedWrapper):
        return handle(x).use_count()
    raise TypeError(f'{type(x).__name__} is not reference counted')


def pointer(x) -> int:
    """Address of the held native object; raises on a null handle"""
    return id(deref(x))


def release(x):
    """
    Drops the wrapper's ownership. For shared wrappers this removes one
        owner; value wrappers destroy their native object.
    """
    if isinstance(x, SharedWrapper):
        handle(x).reset()
    elif isinstance(x, ValueWrapper):
        obj, x.handle = x.handle, None
        destroy = deleter_for(obj) if obj is not None else None
        if destroy is not None:
            destroy(obj)
    elif isinstance(x, SharedPtr):
        x.reset()
    else:
        raise TypeError(f'cannot release {type(x).__name__}')


def move(x):
    """
    Transfers ownership to a new wrapper of the same type, leaving ``x``
        null. The reference count of a shared wrapper is unchanged.
    """
    if isinstance(x, SharedWrapper):
        ptr = handle(x)
        if not ptr:
            raise NullHandleError(f'{type(x).__name__} handle is null (released or moved)')
        x.handle = SharedPtr()
        return type(x).from_handle(ptr)
    if isinstance(x, ValueWrapper):
        obj = deref(x)
        x.handle = None
        return type(x).from_handle(obj)
    raise TypeError(f'cannot move {type(x).__name__}')
