from logging import getLogger

from prettytable import PrettyTable

from ..binding import deref
from ..set_config import get_setting

log = getLogger(__name__)


def cloud_table(cloud, max_rows=None):
    """
    Tabulates the first ``max_rows`` points of a cloud, one column per
        field. Defaults to [display] max_rows.
    """
    if max_rows is None:
        max_rows = get_setting('display', 'max_rows', 10, cast=int)
    native_cloud = deref(cloud)
    fields = list(native_cloud.point_type.fields)
    myTable = PrettyTable(['ID'] + fields)
    points = native_cloud.points
    for idx in range(min(max_rows, len(points))):
        record = points[idx]
        myTable.add_row([idx] + [_cell(record[fname]) for fname in fields])
    if len(points) > max_rows:
        log.debug(f'cloud_table showing {max_rows} of {len(points)} points')
    return myTable


def _cell(value):
    if getattr(value, 'ndim', 0):
        return ', '.join(f'{v:g}' for v in value.tolist())
    return value.item() if hasattr(value, 'item') else value
