"""Reference counted shared ownership of native objects (boost::shared_ptr)"""

import threading
from logging import getLogger

log = getLogger(__name__)


class _ControlBlock:
    __slots__ = ('obj', 'count', 'lock', 'deleter')

    def __init__(self, obj, deleter=None):
        self.obj = obj
        self.count = 1
        self.lock = threading.Lock()
        self.deleter = deleter


class SharedPtr:
    """
    Shared owner of a native object.

    Every SharedPtr aliasing the same object shares one control block;
        ``copy`` adds an owner and ``reset`` (or garbage collection of the
        SharedPtr) removes one. When the last owner goes away the object's
        deleter runs and the object is dropped.
    """

    __slots__ = ('_block', '__weakref__')

    def __init__(self, obj=None, deleter=None):
        self._block = _ControlBlock(obj, deleter) if obj is not None else None

    @classmethod
    def _share(cls, block):
        ptr = cls.__new__(cls)
        ptr._block = block
        return ptr

    def copy(self):
        block = self._block
        if block is None:
            return SharedPtr()
        with block.lock:
            block.count += 1
        return SharedPtr._share(block)

    __copy__ = copy

    def use_count(self) -> int:
        block = self._block
        return block.count if block is not None else 0

    def get(self):
        block = self._block
        return block.obj if block is not None else None

    def reset(self):
        block, self._block = self._block, None
        if block is None:
            return
        with block.lock:
            block.count -= 1
            last = block.count == 0
            obj = block.obj
            if last:
                block.obj = None
        if last:
            log.debug(f'releasing {type(obj).__name__}')
            if block.deleter is not None:
                block.deleter(obj)

    def __bool__(self):
        return self.get() is not None

    def __eq__(self, other):
        if not isinstance(other, SharedPtr):
            return NotImplemented
        return self.get() is other.get()

    def __hash__(self):
        return id(self.get())

    def __del__(self):
        # interpreter shutdown can clear module globals before this runs
        if getattr(self, '_block', None) is not None:
            self.reset()

    def __repr__(self):
        obj = self.get()
        target = type(obj).__name__ if obj is not None else 'nullptr'
        return f'SharedPtr({target}, use_count={self.use_count()})'


def make_shared(obj, deleter=None):
    return SharedPtr(obj, deleter)
