import io

import pytest

from ume.comm import Transport
from ume.datastore import DSEntry
from ume.ds_types import DSType
from ume.entity import Entity, MeshBase
from ume.faces import FaceCoord, Faces
from ume.utils import BinaryReader, BinaryWriter
from ume.vecn import Vec3


class _NullTransport(Transport):
    def stop(self):
        return 0


class _Mesh(MeshBase):
    def __init__(self):
        super().__init__()
        self.comm = _NullTransport()
        self.faces = Faces(self)
        self.sides = Entity(self)
        for name in ("m:s>f", "m:s>p1"):
            self.ds.insert(name, DSEntry(DSType.INTV))
        self.ds.insert("pcoord", DSEntry(DSType.VEC3V))


def _build(points, s2f, s2p1, smask, nfaces, fmask, local_faces=None):
    mesh = _Mesh()
    mesh.ds.assign("pcoord", list(points))
    mesh.ds.assign("m:s>f", list(s2f))
    mesh.ds.assign("m:s>p1", list(s2p1))
    mesh.sides.resize(len(smask), len(smask), 0)
    mesh.sides.mask[:] = smask
    lf = nfaces if local_faces is None else local_faces
    mesh.faces.resize(lf, nfaces, nfaces - lf)
    mesh.faces.mask[:] = fmask
    return mesh


def _fcoord(mesh):
    return mesh.ds.caccess("fcoord", DSType.VEC3V)


def _write(faces):
    buf = io.BytesIO()
    faces.write(BinaryWriter(buf))
    return buf.getvalue()


def test_square_face_center():
    points = [Vec3(0, 0, 0), Vec3(2, 0, 0), Vec3(2, 2, 0), Vec3(0, 2, 0)]
    mesh = _build(points, [0, 0, 0, 0], [0, 1, 2, 3], [1, 1, 1, 1], 1, [1])
    assert _fcoord(mesh)[0] == Vec3(1.0, 1.0, 0.0)


def test_masked_sides_are_ignored():
    p = Vec3(1.0, 2.0, 3.0)
    far = Vec3(100.0, 100.0, 100.0)
    mesh = _build([p, far], [0, 0, 0], [0, 0, 1], [1, 1, 0], 1, [1])
    assert _fcoord(mesh)[0] == p


def test_unmasked_face_keeps_sum():
    a = Vec3(1.0, 2.0, 3.0)
    b = Vec3(4.0, 5.0, 6.0)
    mesh = _build([a, b], [0, 0], [0, 1], [1, 1], 1, [0])
    assert _fcoord(mesh)[0] == a + b


def test_ghost_faces_are_zero():
    p = Vec3(1.0, 1.0, 1.0)
    mesh = _build([p], [0], [0], [1], 2, [1, 1], local_faces=1)
    coords = _fcoord(mesh)
    assert len(coords) == 2
    assert coords[1] == 0.0


def test_side_on_nonlocal_face_raises():
    mesh = _build([Vec3()], [1], [0], [1], 2, [1, 1], local_faces=1)
    field = FaceCoord(mesh.faces)
    with pytest.raises(IndexError):
        field.compute()


def test_fcoord_computed_once():
    p = Vec3(3.0, 3.0, 3.0)
    mesh = _build([p], [0], [0], [1], 1, [1])
    first = _fcoord(mesh)
    second = _fcoord(mesh)
    assert first is second
    assert isinstance(mesh.ds.find("fcoord"), FaceCoord)


def _filled_faces():
    mesh = _Mesh()
    mesh.faces.resize(2, 3, 1)
    mesh.faces.mask[:] = [1, 1, -1]
    mesh.faces.cpy_idx[:] = [2]
    mesh.ds.access("m:f>z1", DSType.INTV)[:] = [0, 1, 2]
    mesh.ds.access("m:f>z2", DSType.INTV)[:] = [1, 2, -1]
    return mesh


def test_round_trip():
    mesh = _filled_faces()
    other = _Mesh()
    other.faces.read(BinaryReader(io.BytesIO(_write(mesh.faces))))
    assert other.faces == mesh.faces
    assert other.ds.caccess("m:f>z2", DSType.INTV) == [1, 2, -1]


def test_record_starts_with_tag():
    raw = _write(_filled_faces().faces)
    assert int.from_bytes(raw[:8], "little") == 5
    assert raw[8:13] == b"faces"


def test_read_wrong_tag_raises():
    buf = io.BytesIO()
    BinaryWriter(buf).write_string("zones")
    buf.seek(0)
    with pytest.raises(ValueError):
        _Mesh().faces.read(BinaryReader(buf))


def test_resize():
    faces = Faces(MeshBase())
    faces.resize(2, 5, 3)
    assert faces.size() == 5
    assert faces.local_size() == 2
    assert len(faces.cpy_idx) == 3
    assert len(faces.ds().caccess("m:f>z1", DSType.INTV)) == 5
    assert len(faces.ds().caccess("m:f>z2", DSType.INTV)) == 5


def test_eq_detects_map_difference():
    a = Faces(MeshBase())
    b = Faces(MeshBase())
    for faces in (a, b):
        faces.resize(2, 3, 1)
        faces.mask[:] = [1, 1, -1]
        faces.ds().access("m:f>z1", DSType.INTV)[:] = [0, 1, 2]
        faces.ds().access("m:f>z2", DSType.INTV)[:] = [1, 2, -1]
    assert a == b
    b.ds().access("m:f>z1", DSType.INTV)[0] = 7
    assert not a == b