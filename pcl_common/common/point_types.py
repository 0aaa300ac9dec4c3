"""
PCL point types, one module level name per native layout:

```python
p = PointXYZ(1, 2, 3)
p.x            # 1.0
PointXYZRGBA().a  # 255
```
"""

from ..native.point_types import POINT_TYPES, Point, PointType, get_point_type

# from PCL_POINT_TYPES in point_types.hpp
for _name, _point_type in POINT_TYPES.items():
    globals()[_name] = _point_type

__all__ = ["Point", "PointType", "get_point_type", *POINT_TYPES]
