import io
import struct

import pytest

from ume.comm import (
    Buffers,
    DummyTransport,
    Neighbor,
    Op,
    Remote,
    Transport,
    TransportAbort,
    read_neighbors,
    write_neighbors,
)
from ume.utils import BinaryReader, BinaryWriter
from ume.vecn import Vec3


class LoopbackTransport(Transport):
    """Delivers each send buffer straight into the receive buffer."""

    def exchange(self, sends, recvs):
        recvs.buf = list(sends.buf)

    def stop(self):
        return 0


NEIGHBORS = [Neighbor(1, [0, 2]), Neighbor(3, [1])]


def roundtrip(neighbors):
    stream = io.BytesIO()
    write_neighbors(BinaryWriter(stream), neighbors)
    stream.seek(0)
    return read_neighbors(BinaryReader(stream)), stream


def test_empty_neighbors_wire_bytes():
    stream = io.BytesIO()
    write_neighbors(BinaryWriter(stream), [])
    expected = (
        struct.pack("<Q", 9) + b"neighbors" + struct.pack("<Q", 0) + b"\n"
    )
    assert stream.getvalue() == expected


def test_neighbors_roundtrip():
    result, stream = roundtrip(NEIGHBORS)
    assert result == NEIGHBORS
    assert stream.read() == b""


def test_neighbors_roundtrip_empty():
    result, _ = roundtrip([])
    assert result == []


def test_neighbors_bad_tag():
    stream = io.BytesIO()
    BinaryWriter(stream).write_string("zones")
    stream.seek(0)
    with pytest.raises(ValueError):
        read_neighbors(BinaryReader(stream))


def test_buffer_layout_scalar():
    bufs = Buffers(NEIGHBORS)
    assert bufs.num_entries() == 3
    assert bufs.b2e == [0, 2, 1]
    assert bufs.remotes[0] == Remote(pe=1, buf_offset=0, buf_len=2)
    assert len(bufs.buf) == bufs.num_entries()


def test_buffer_layout_vec3_is_contiguous():
    bufs = Buffers(NEIGHBORS, width=3)
    assert [r.pe for r in bufs.remotes] == [1, 3]
    assert sum(r.buf_len for r in bufs.remotes) == len(bufs.buf)
    first, second = bufs.remotes
    assert second.buf_offset == first.buf_offset + first.buf_len


def test_invalid_width():
    with pytest.raises(ValueError):
        Buffers(NEIGHBORS, width=0)


def test_pack_scalar_follows_map():
    field = [10, 20, 30]
    bufs = Buffers(NEIGHBORS)
    bufs.pack(field)
    assert bufs.buf == [field[e] for e in bufs.b2e]


def test_pack_unpack_overwrite_roundtrip_vec3():
    source = [Vec3(1, 2, 3), Vec3(4, 5, 6), Vec3(7, 8, 9)]
    bufs = Buffers(NEIGHBORS, width=3)
    bufs.pack(source)
    target = [Vec3() for _ in source]
    bufs.unpack(target, Op.OVERWRITE)
    assert target == source


def test_overwrite_twice_raises():
    bufs = Buffers([Neighbor(0, [1]), Neighbor(2, [1])])
    bufs.pack([0, 5])
    with pytest.raises(ValueError):
        bufs.unpack([0, 0], Op.OVERWRITE)


def test_sum_into_zero_equals_overwrite():
    source = [1.5, -2.0, 4.0]
    bufs = Buffers(NEIGHBORS)
    bufs.pack(source)
    summed = [0.0, 0.0, 0.0]
    bufs.unpack(summed, Op.SUM)
    assert summed == source


def test_sum_accumulates_duplicates():
    bufs = Buffers([Neighbor(0, [0]), Neighbor(1, [0])])
    bufs.buf = [3, 4]
    field = [0]
    bufs.unpack(field, Op.SUM)
    assert field == [7]


def test_max_and_min():
    bufs = Buffers(NEIGHBORS)
    bufs.pack([5, 5, 5])
    high = [9, 1, 9]
    bufs.unpack(high, Op.MAX)
    assert high == [9, 5, 9]
    low = [9, 1, 9]
    bufs.unpack(low, Op.MIN)
    assert low == [5, 1, 5]


def test_loopback_exchange():
    sends = Buffers([Neighbor(0, [0, 1])])
    recvs = Buffers([Neighbor(0, [2, 3])])
    field = [1, 2, 0, 0]
    sends.pack(field)
    LoopbackTransport().exchange(sends, recvs)
    recvs.unpack(field, Op.OVERWRITE)
    assert field == [1, 2, 1, 2]


def test_base_exchange_is_noop():
    sends = Buffers([Neighbor(0, [0])])
    recvs = Buffers([Neighbor(0, [0])])
    sends.pack([8])
    transport = LoopbackTransport()
    Transport.exchange(transport, sends, recvs)
    assert recvs.buf == [0]


def test_transport_is_abstract():
    with pytest.raises(TypeError):
        Transport()


def test_abort_raises():
    transport = DummyTransport()
    with pytest.raises(TransportAbort, match="boom"):
        transport.abort("boom")


def test_dummy_transport(capsys):
    transport = DummyTransport()
    assert "silently fail" in capsys.readouterr().err
    assert transport.stop() == -1
    assert transport.id() == -1