# aistiles

Tools for measured vessel trajectories: line strings whose points carry a measure value
(`m`, a Unix timestamp in seconds) next to longitude and latitude. Everything is plain
Python with no dependencies beyond the standard library.

## What is in the package

- **Geometry** (`aistiles.geometry`, `aistiles.multi`): frozen dataclasses `CoordM`,
  `PointM`, `LineM`, `LineStringM`, `MultiPointM` and `MultiLineStringM`.
  `LineStringM.checked` rejects a single point (`NumPointsError`) and coordinates not
  ordered by measure (`TimestampError`); `LineStringM.from_coords` only rejects a single
  point. `points()` and `lines()` iterate a linestring as points or segments.
- **Errors** (`aistiles.errors`): `GeometryError`, a `ValueError`, and its subclasses
  `NumPointsError`, `TimestampError`, `IncompatibleTypeError`, `EmptyError` and
  `DimensionError`.
- **Well-known binary** (`aistiles.wkb`): `dumps` writes points, linestrings, multipoints
  and multilinestrings as little-endian ISO WKB with an M dimension; `dumps_polygon`
  writes a planar polygon. `loads` and the readers `read_coord`, `read_point`,
  `read_linestring`, `read_multipoint`, `read_multilinestring` and `read_polygon` accept
  either byte order, ISO and extended (SRID/Z/M flag) type codes.
- **Geodesy** (`aistiles.geodesic`): `inverse` and `direct` on the WGS84 ellipsoid
  (Vincenty's formulae), `distance`, `haversine_distance`, `euclidean_distance` and
  `point_at_distance_between`.
- **Segmentation** (`aistiles.segmenter`): `segmenter` splits a linestring wherever a
  predicate on two consecutive points is false, giving `SubTrajectory` and `SplitPoint`
  pieces; `concat_to_linestring` joins them back; `segment_timestamp` turns the pieces
  into `(start, duration)` intervals.
- **Stop detection** (`aistiles.stop_cluster`): `DbScanConf`, a DBSCAN over time-ordered
  `(point, speed)` pairs that also requires low speed and a small time gap, returning a
  `Classification` per point; `cluster_to_traj_with_stop_object` turns runs of clustered
  points into `Stop` objects (convex hull and time range) and the rest into
  `TrajectoryPart` objects; `triangulate_stop_object` splits a stop polygon into triangles.
- **Planar helpers** (`aistiles.planar`): `convex_hull` and ear-clipping `triangulate`.
- **Tiles** (`aistiles.tiles`, `aistiles.tile3d`, `aistiles.modeling`): `point_to_grid`
  maps lon/lat to slippy-map tiles, `draw_line` draws Bresenham lines,
  `draw_linestring` rasterises trajectories with occupation time spans, and
  `draw_2d_vessel` rasterises the footprint a vessel of given bow/stern/port/starboard
  distances sweeps along its path, built from `line_to_triangle_pair`.
  `render_stop_object` lists the tiles a polygon covers. Results can be limited to one
  tile with `FilterTile`.

## Installation

From a checkout:

```
pip install .
```

## Example

```python
from aistiles.geometry import CoordM, LineStringM
from aistiles.geodesic import distance
from aistiles.segmenter import segmenter, SubTrajectory

track = LineStringM.checked([
    CoordM(10.0, 57.0, 0.0),
    CoordM(10.001, 57.0, 30.0),
    CoordM(10.002, 57.0, 400.0),
    CoordM(10.003, 57.0, 420.0),
])

pieces = segmenter(
    track,
    lambda a, b: distance(a, b) < 1000 and b.m - a.m < 60,
)
for piece in pieces:
    kind = "trajectory" if isinstance(piece, SubTrajectory) else "point"
    print(kind, piece.to_wkb().hex())
```

Rasterising a trajectory into zoom-16 tiles:

```python
from aistiles.tiles import draw_linestring

for cell in draw_linestring([track], 16, 16, None):
    print(cell.point.x, cell.point.y, cell.time_start, cell.time_end)
```

## What the package does not do

It is a library only. It has no command-line tool, does not load trajectories from or
store results in a database, and does not serve tiles; reading input and writing output
is left to the caller, for example through `aistiles.wkb`.

## Tests

```
pip install -e ".[test]"
pytest
```