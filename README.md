# ume

Building blocks for a struct-of-arrays representation of a partitioned,
unstructured 3-D mesh. Mesh variables live in a hierarchical datastore.
Derived quantities are datastore entries that compute their value the first
time they are read.

## Install

    pip install .

Install the `test` extra with `pip install .[test]` to run the test suite with `pytest`.

## What is in the package

- `ume.vecn`: `VecN` and `Vec3` are small mutable vectors with element-wise
  and scalar arithmetic. The module also has `crossprod`, `dotprod`,
  `normalize` (which works in place) and `vectormag`.
- `ume.ragged`: `RaggedRight` is a list of rows of differing lengths, kept in
  one flat list.
- `ume.ds_types`: `DSType` names the kinds of value a datastore entry can
  hold. `default_value` returns an empty value of a given kind.
- `ume.datastore`: `Datastore` is a tree of named `DSEntry` objects. A lookup
  searches from the current node up towards the root. `access` returns a value
  for modification and marks it dirty. `caccess` returns a value for reading.
  `assign` replaces a value. A missing name raises `KeyError`, and a value of
  the wrong kind raises `TypeError`.
- `ume.utils`: `BinaryWriter` and `BinaryReader` handle the binary record
  format. Sizes are 64-bit and integers are 32-bit, both little-endian.
  Strings are prefixed with their length. Arrays are prefixed with their
  length and end with a newline. The module also has `ltrim`, `rtrim`, `trim`
  and `debug_attach_point`. The last of these pauses the process when
  `UME_DEBUG_RANK` names the given rank.
- `ume.timer`: `Timer` adds up wall time over repeated start/stop intervals,
  and can also be used as a context manager.
- `ume.comm`: `Neighbor` lists the element indices exchanged with a remote PE.
  `write_neighbors` and `read_neighbors` store such lists. `Buffers` packs the
  listed elements of a field into one aggregated buffer. It then unpacks them
  with an `Op`: `OVERWRITE`, `MAX`, `MIN` or `SUM`. `Transport` is the
  abstract exchange mechanism. `DummyTransport` is a transport whose exchanges
  do nothing.
- `ume.entity`: `MeshBase` holds a root datastore and an optional transport.
  `Entity` holds the per-element masks, the communication types (`CommType`),
  the ghost arrays, the neighbor lists and the `Subset` list. It has binary
  `write` and `read`, `resize`, and `gather`, `scatter` and `gathscat` over
  the mesh's transport. `EntityField` is a datastore entry that computes its
  value once, on first access.
- `ume.edges`, `ume.faces` and `ume.corners`: `Edges`, `Faces` and `Corners`
  add their connectivity maps to the datastore, together with computed
  fields:
  - `ecoord` (edge centres);
  - `fcoord` (face centres);
  - `corner_vol`, `corner_csurf` and `m:c>ss`.

## Example

```python
import io

from ume.datastore import DSEntry
from ume.ds_types import DSType
from ume.edges import Edges
from ume.entity import MeshBase
from ume.utils import BinaryReader, BinaryWriter
from ume.vecn import Vec3

mesh = MeshBase()
edges = Edges(mesh)
edges.resize(1, 1, 0)
edges.mask[0] = 1

mesh.ds.insert("pcoord", DSEntry(DSType.VEC3V))
mesh.ds.assign("pcoord", [Vec3(0, 0, 0), Vec3(2, 0, 0)])
mesh.ds.access("m:e>p1", DSType.INTV)[0] = 0
mesh.ds.access("m:e>p2", DSType.INTV)[0] = 1

print(mesh.ds.caccess("ecoord", DSType.VEC3V))  # [Vec3(1.0, 0.0, 0.0)]

buffer = io.BytesIO()
edges.write(BinaryWriter(buffer))
buffer.seek(0)
copy = Edges(MeshBase())
copy.read(BinaryReader(buffer))
```

Some computed fields draw on several entities. `fcoord` and the corner fields
read `mesh.sides` and side variables such as `m:s>f`, `side_vol` and
`side_surf`. The mesh object you pass in must supply these.

## What the package does not do

The package has no complete mesh class that brings all six entity kinds
together. It has no points, zones or sides entities. It cannot read or write a
whole mesh file, and it has no gradient or face-area calculations. It installs
no command-line programs: there is no text-dump converter and no reader for
binary mesh files. The only transport is `DummyTransport`, so partitions do
not actually exchange data with each other.