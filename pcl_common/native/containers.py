"""
Native helper containers: std::vector and the small PCL structs
"""

import sys
from dataclasses import dataclass, field

import numpy as np

from ..errors import NativeError, NativeIndexError
from .cloud import Header, NativePointCloud

SCALAR_TYPES = {
    'double': np.float64,
    'float': np.float32,
    'int': np.int32,
    'int32_t': np.int32,
    'unsigned int': np.uint32,
    'uint32_t': np.uint32,
    'long': np.int64,
    'int64_t': np.int64,
    'size_t': np.uint64,
    'uint8_t': np.uint8,
    'unsigned char': np.uint8,
    'bool': np.bool_,
}

FLT_MAX = float(np.finfo(np.float32).max)


class NativeVector:
    """
    std::vector<T>. Scalar element types are kept as a numpy array,
        anything else as a python list of native objects.
    """

    cxxname = 'std::vector'

    def __init__(self, element_type, n=0):
        if n < 0:
            raise NativeError(f'invalid vector size {n}')
        self.element_type = element_type
        self._dtype = SCALAR_TYPES.get(element_type) if isinstance(element_type, str) else None
        if self._dtype is not None:
            self._values = np.zeros(int(n), dtype=self._dtype)
        else:
            self._values = [self._default() for _ in range(int(n))]

    @classmethod
    def instantiate(cls, element_type):
        def _construct(*args):
            return cls(element_type, *args)
        _construct.__qualname__ = f'{cls.__name__}<{element_type}>'
        return _construct

    @property
    def template_args(self):
        return (self.element_type,)

    def _default(self):
        if callable(self.element_type):
            return self.element_type()
        raise NativeError(f'no default value for elements of type {self.element_type!r}')

    def size(self):
        return len(self._values)

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(self._values.tolist() if self._dtype is not None else self._values)

    def __getitem__(self, i):
        if not -len(self._values) <= i < len(self._values):
            raise NativeIndexError(f'index {i} out of range for a vector of {len(self._values)}')
        value = self._values[i]
        return value.item() if self._dtype is not None else value

    def __setitem__(self, i, value):
        if not -len(self._values) <= i < len(self._values):
            raise NativeIndexError(f'index {i} out of range for a vector of {len(self._values)}')
        self._values[i] = value

    def push_back(self, value):
        if self._dtype is not None:
            self._values = np.append(self._values, np.asarray(value, dtype=self._dtype))
        else:
            self._values.append(value)

    def assign(self, values):
        if self._dtype is not None:
            self._values = np.array(values, dtype=self._dtype).reshape(-1)
        else:
            self._values = list(values)

    def resize(self, n):
        if n < 0:
            raise NativeError(f'invalid vector size {n}')
        current = len(self._values)
        if self._dtype is not None:
            grown = np.zeros(n, dtype=self._dtype)
            grown[:min(n, current)] = self._values[:n]
            self._values = grown
        elif n < current:
            del self._values[n:]
        else:
            self._values.extend(self._default() for _ in range(n - current))

    def clear(self):
        self.resize(0)

    def to_numpy(self):
        if self._dtype is None:
            raise NativeError(f'vector of {self.element_type!r} has no array view')
        return self._values

    def clone(self):
        other = NativeVector.__new__(NativeVector)
        other.element_type = self.element_type
        other._dtype = self._dtype
        if self._dtype is not None:
            other._values = self._values.copy()
        else:
            other._values = [v.clone() if hasattr(v, 'clone') else v for v in self._values]
        return other

    def __deepcopy__(self, memo):
        return self.clone()

    def __str__(self):
        return f"[{', '.join(str(v) for v in self)}]"


@dataclass
class NativeCorrespondence:
    """pcl::Correspondence"""
    index_query: int = 0
    index_match: int = -1
    distance: float = FLT_MAX

    cxxname = 'pcl::Correspondence'

    def clone(self):
        return NativeCorrespondence(self.index_query, self.index_match, self.distance)


def native_correspondences(n=0):
    """pcl::Correspondences, a std::vector<pcl::Correspondence>"""
    return NativeVector(NativeCorrespondence, n)


@dataclass
class NativeModelCoefficients:
    """pcl::ModelCoefficients"""
    header: Header = field(default_factory=Header)
    values: NativeVector = field(default_factory=lambda: NativeVector('float'))

    cxxname = 'pcl::ModelCoefficients'

    def clone(self):
        return NativeModelCoefficients(Header(**vars(self.header)), self.values.clone())


@dataclass
class NativePointIndices:
    """pcl::PointIndices"""
    header: Header = field(default_factory=Header)
    indices: NativeVector = field(default_factory=lambda: NativeVector('int'))

    cxxname = 'pcl::PointIndices'

    def clone(self):
        return NativePointIndices(Header(**vars(self.header)), self.indices.clone())


@dataclass
class PCLPointField:
    name: str
    offset: int
    datatype: int
    count: int = 1


# pcl::PCLPointField::PointFieldTypes
_DATATYPES = {
    np.dtype(np.int8): 1, np.dtype(np.uint8): 2,
    np.dtype(np.int16): 3, np.dtype(np.uint16): 4,
    np.dtype(np.int32): 5, np.dtype(np.uint32): 6,
    np.dtype(np.float32): 7, np.dtype(np.float64): 8,
}


@dataclass
class NativePCLPointCloud2:
    """pcl::PCLPointCloud2, an untyped binary blob"""
    header: Header = field(default_factory=Header)
    height: int = 0
    width: int = 0
    fields: list = field(default_factory=list)
    is_bigendian: bool = sys.byteorder == 'big'
    point_step: int = 0
    row_step: int = 0
    data: bytes = b''
    is_dense: bool = False

    cxxname = 'pcl::PCLPointCloud2'

    def clone(self):
        return NativePCLPointCloud2(Header(**vars(self.header)), self.height, self.width,
                                    [PCLPointField(**vars(f)) for f in self.fields],
                                    self.is_bigendian, self.point_step, self.row_step,
                                    bytes(self.data), self.is_dense)


def to_pcl_point_cloud2(cloud, blob):
    """pcl::toPCLPointCloud2"""
    dtype = cloud.point_type.dtype
    blob.fields = []
    for fname in dtype.names:
        sub_dtype, offset = dtype.fields[fname][:2]
        base = sub_dtype.base
        count = int(np.prod(sub_dtype.shape)) if sub_dtype.shape else 1
        blob.fields.append(PCLPointField(fname, offset, _DATATYPES[base], count))
    blob.header = Header(**vars(cloud.header))
    blob.width, blob.height = cloud.width, cloud.height
    blob.point_step = dtype.itemsize
    blob.row_step = dtype.itemsize * cloud.width
    blob.is_dense = cloud.is_dense
    blob.is_bigendian = sys.byteorder == 'big'
    blob.data = cloud.points.tobytes()
    return blob


def from_pcl_point_cloud2(blob, cloud):
    """
    pcl::fromPCLPointCloud2. Fields are matched by name; blob fields the
        layout lacks are dropped and layout fields the blob lacks keep
        their defaults.
    """
    by_type = {code: dt for dt, code in _DATATYPES.items()}
    if blob.point_step <= 0:
        count = 0
    else:
        if len(blob.data) % blob.point_step:
            raise NativeError(f'blob size {len(blob.data)} is not a multiple of point_step {blob.point_step}')
        count = len(blob.data) // blob.point_step
    names, formats, offsets = [], [], []
    for f in blob.fields:
        if f.datatype not in by_type:
            raise NativeError(f'unsupported field datatype {f.datatype} for {f.name!r}')
        names.append(f.name)
        formats.append((by_type[f.datatype], (f.count,)) if f.count > 1 else by_type[f.datatype])
        offsets.append(f.offset)
    blob_dtype = np.dtype({'names': names, 'formats': formats, 'offsets': offsets,
                           'itemsize': max(blob.point_step, 1)})
    records = np.frombuffer(blob.data, dtype=blob_dtype, count=count) if count else np.empty(0, blob_dtype)
    out = cloud.point_type.default_array(count)
    for fname in cloud.point_type.fields:
        if fname in names:
            out[fname] = records[fname]
    cloud.points = out
    cloud.header = Header(**vars(blob.header))
    cloud.width, cloud.height = blob.width, blob.height
    if cloud.width * cloud.height != count:
        cloud.width, cloud.height = count, 1
    cloud.is_dense = bool(blob.is_dense)
    return cloud


class NativePCLBase:
    """
    pcl::PCLBase<PointT>: holds an input cloud and optional indices,
        both shared with the caller.
    """

    cxxname = 'pcl::PCLBase'

    def __init__(self, point_type):
        self.point_type = point_type
        self.input = None
        self.indices = None

    @classmethod
    def instantiate(cls, point_type):
        def _construct(*args):
            return cls(point_type, *args)
        _construct.__qualname__ = f'{cls.__name__}<{point_type.name}>'
        return _construct

    @property
    def template_args(self):
        return (self.point_type,)

    def set_input_cloud(self, cloud_ptr):
        target = cloud_ptr.get()
        if not isinstance(target, NativePointCloud):
            raise NativeError('input must be a shared pointer to a point cloud')
        if target.point_type is not self.point_type:
            raise NativeError(f'input cloud holds {target.point_type.name}, expected {self.point_type.name}')
        if self.input is not None:
            self.input.reset()
        self.input = cloud_ptr.copy()

    def get_input_cloud(self):
        if self.input is None:
            raise NativeError('no input cloud has been set')
        return self.input.copy()

    def set_indices(self, indices_ptr):
        if self.indices is not None:
            self.indices.reset()
        self.indices = indices_ptr.copy()

    def get_indices(self):
        if self.indices is None:
            raise NativeError('no indices have been set')
        return self.indices.copy()

    def destroy(self):
        for ptr in (self.input, self.indices):
            if ptr is not None:
                ptr.reset()
        self.input = self.indices = None
