"""
Native point layouts

Each PCL point type is a fixed record described by a numpy structured
dtype. Layouts are closed: the set of fields is fixed at import time.
"""

import numpy as np

from ..errors import BindingError

F4 = np.float32
U1 = np.uint8
U4 = np.uint32
I4 = np.int32

_XYZ = [('x', F4), ('y', F4), ('z', F4)]
_RGBA = [('b', U1), ('g', U1), ('r', U1), ('a', U1)]
_NORMAL = [('normal_x', F4), ('normal_y', F4), ('normal_z', F4)]
_CURV = [('curvature', F4)]
_RF = [('rf', F4, (9,))]

# from PCL_POINT_TYPES in point_types.hpp
POINT_LAYOUTS = {
    'PointXYZ': _XYZ,
    'PointXYZI': _XYZ + [('intensity', F4)],
    'PointXYZL': _XYZ + [('label', U4)],
    'Label': [('label', U4)],
    'PointXYZRGBA': _XYZ + _RGBA,
    'PointXYZRGB': _XYZ + _RGBA,
    'PointXYZRGBL': _XYZ + _RGBA + [('label', U4)],
    'PointXYZHSV': _XYZ + [('h', F4), ('s', F4), ('v', F4)],
    'PointXY': [('x', F4), ('y', F4)],
    'InterestPoint': _XYZ + [('strength', F4)],
    'Axis': _NORMAL,
    'Normal': _NORMAL + _CURV,
    'PointNormal': _XYZ + _NORMAL + _CURV,
    'PointXYZRGBNormal': _XYZ + _RGBA + _NORMAL + _CURV,
    'PointXYZINormal': _XYZ + [('intensity', F4)] + _NORMAL + _CURV,
    'PointXYZLNormal': _XYZ + [('label', U4)] + _NORMAL + _CURV,
    'PointWithRange': _XYZ + [('range', F4)],
    'PointWithViewpoint': _XYZ + [('vp_x', F4), ('vp_y', F4), ('vp_z', F4)],
    'MomentInvariants': [('j1', F4), ('j2', F4), ('j3', F4)],
    'PrincipalRadiiRSD': [('r_min', F4), ('r_max', F4)],
    'Boundary': [('boundary_point', U1)],
    'PrincipalCurvatures': [('principal_curvature_x', F4), ('principal_curvature_y', F4),
                            ('principal_curvature_z', F4), ('pc1', F4), ('pc2', F4)],
    'PFHSignature125': [('histogram', F4, (125,))],
    'PFHRGBSignature250': [('histogram', F4, (250,))],
    'PPFSignature': [('f1', F4), ('f2', F4), ('f3', F4), ('f4', F4), ('alpha_m', F4)],
    'CPPFSignature': [(f'f{i}', F4) for i in range(1, 11)] + [('alpha_m', F4)],
    'PPFRGBSignature': [('f1', F4), ('f2', F4), ('f3', F4), ('f4', F4),
                        ('r_ratio', F4), ('g_ratio', F4), ('b_ratio', F4), ('alpha_m', F4)],
    'NormalBasedSignature12': [('values', F4, (12,))],
    'FPFHSignature33': [('histogram', F4, (33,))],
    'VFHSignature308': [('histogram', F4, (308,))],
    'GRSDSignature21': [('histogram', F4, (21,))],
    'ESFSignature640': [('histogram', F4, (640,))],
    'BRISKSignature512': [('scale', F4), ('orientation', F4), ('descriptor', U1, (64,))],
    'Narf36': _XYZ + [('roll', F4), ('pitch', F4), ('yaw', F4), ('descriptor', F4, (36,))],
    'IntensityGradient': [('gradient_x', F4), ('gradient_y', F4), ('gradient_z', F4)],
    'PointWithScale': _XYZ + [('scale', F4), ('angle', F4), ('response', F4), ('octave', I4)],
    'PointSurfel': _XYZ + _NORMAL + _RGBA + [('radius', F4), ('confidence', F4)] + _CURV,
    'ShapeContext1980': [('descriptor', F4, (1980,))] + _RF,
    'UniqueShapeContext1960': [('descriptor', F4, (1960,))] + _RF,
    'SHOT352': [('descriptor', F4, (352,))] + _RF,
    'SHOT1344': [('descriptor', F4, (1344,))] + _RF,
    'PointUV': [('u', F4), ('v', F4)],
    'ReferenceFrame': [('x_axis', F4, (3,)), ('y_axis', F4, (3,)), ('z_axis', F4, (3,))],
    'PointDEM': _XYZ + [('intensity', F4), ('intensity_variance', F4), ('height_variance', F4)],
}

# fields whose default is not zero
_DEFAULTS = {
    'a': 255,
}


class PointType:
    """
    A native point layout. Calling it builds a default initialized record;
        positional arguments fill fields in declaration order.
    """

    def __init__(self, name, layout):
        self.name = name
        self.cxxname = f'pcl::{name}'
        self.dtype = np.dtype(layout)
        self.fields = tuple(self.dtype.names)
        self._default = np.zeros((), dtype=self.dtype)
        for fname, value in _DEFAULTS.items():
            if fname in self.fields:
                self._default[fname] = value

    @property
    def has_xyz(self):
        return all(axis in self.fields for axis in ('x', 'y', 'z'))

    def default_array(self, count):
        """A contiguous array of ``count`` default initialized records"""
        arr = np.empty(count, dtype=self.dtype)
        arr[...] = self._default
        return arr

    def __call__(self, *args, **kwargs):
        if len(args) > len(self.fields):
            raise TypeError(f'{self.name} takes at most {len(self.fields)} field values, got {len(args)}')
        data = self._default.copy()
        for fname, value in zip(self.fields, args):
            data[fname] = value
        for fname, value in kwargs.items():
            if fname not in self.fields:
                raise TypeError(f'{self.name} has no field {fname!r}')
            if fname in self.fields[:len(args)]:
                raise TypeError(f'{self.name} got multiple values for field {fname!r}')
            data[fname] = value
        return Point(self, data)

    def __instancecheck__(self, obj):
        return isinstance(obj, Point) and obj.point_type is self

    def __repr__(self):
        return self.name

    def __reduce__(self):
        return (get_point_type, (self.name,))


class Point:
    """
    One point record. ``data`` is a 0-d structured array; records taken
        from a cloud are views into the cloud's storage, so writes go
        through to the cloud until its storage is reallocated.
    """

    __slots__ = ('point_type', 'data')

    def __init__(self, point_type, data):
        object.__setattr__(self, 'point_type', point_type)
        object.__setattr__(self, 'data', data)

    def __getattr__(self, name):
        if name in Point.__slots__:
            raise AttributeError(name)
        if name in self.point_type.fields:
            return _to_python(self.data[name])
        raise AttributeError(f'{self.point_type.name} has no field {name!r}')

    def __setattr__(self, name, value):
        if name not in self.point_type.fields:
            raise AttributeError(f'{self.point_type.name} has no field {name!r}')
        self.data[name] = value

    def __getitem__(self, name):
        return self.__getattr__(name)

    def __setitem__(self, name, value):
        self.__setattr__(name, value)

    def copy(self):
        return Point(self.point_type, self.data.copy())

    __copy__ = copy

    def __deepcopy__(self, memo):
        return self.copy()

    def __reduce__(self):
        return (Point, (self.point_type, self.data.copy()))

    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        if other.point_type is not self.point_type:
            return False
        return all(np.array_equal(self.data[f], other.data[f], equal_nan=True)
                   if self.data[f].dtype.kind == 'f' else np.array_equal(self.data[f], other.data[f])
                   for f in self.point_type.fields)

    __hash__ = None

    def __repr__(self):
        shown = []
        for fname in self.point_type.fields:
            value = self.data[fname]
            if value.ndim:
                shown.append(f'{fname}=<{value.size} values>')
            else:
                shown.append(f'{fname}={_to_python(value)}')
        return f"{self.point_type.name}({', '.join(shown)})"


def _to_python(value):
    if value.ndim == 0:
        return value.item()
    return value


POINT_TYPES = {name: PointType(name, layout) for name, layout in POINT_LAYOUTS.items()}


def get_point_type(name):
    key = name[len('pcl::'):] if name.startswith('pcl::') else name
    try:
        return POINT_TYPES[key]
    except KeyError:
        raise BindingError(f'unknown point type {name!r}') from None
