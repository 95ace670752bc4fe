import numpy as np
import pytest

from wordspace import (MemorySpace, FREE, ALLOCATED, coverage, occupancy,
                       check_invariants, is_coalesced, fragmentation, text_map)

def make_checkerboard():
    mem = MemorySpace(40)
    addrs = [mem.malloc(10) for _ in range(4)]
    mem.free(addrs[0])
    mem.free(addrs[2])
    return mem

def test_occupancy():
    mem = make_checkerboard()
    words = occupancy(mem)
    assert words.shape == (40,)
    assert words.dtype == np.int8
    ref = np.array([FREE]*10 + [ALLOCATED]*10 + [FREE]*10 + [ALLOCATED]*10, dtype=np.int8)
    assert (words == ref).all(), f"{words=}"
    assert (coverage(mem) == 1).all()

def test_fragmentation():
    st = fragmentation(make_checkerboard())
    assert st.free_words == 20
    assert st.allocated_words == 20
    assert st.free_blocks == 2
    assert st.allocated_blocks == 2
    assert st.largest_free == 10
    assert st.fragmentation == pytest.approx(0.5)

def test_fragmentation_full_space():
    mem = MemorySpace(8)
    mem.malloc(8)
    st = fragmentation(mem)
    assert st.free_words == 0
    assert st.largest_free == 0
    assert st.fragmentation == 0.0

def test_fragmentation_drops_after_defrag():
    mem = MemorySpace(30)
    a = mem.malloc(10)
    b = mem.malloc(10)
    mem.free(a)
    mem.free(b)
    assert fragmentation(mem).fragmentation > 0
    assert not is_coalesced(mem)
    mem.defrag()
    assert is_coalesced(mem)
    assert fragmentation(mem).fragmentation == 0.0

@pytest.mark.parametrize("width, ref", [(4, ".#.#"), (40, "."*10 + "#"*10 + "."*10 + "#"*10), (2, "++"), (1000, "."*10 + "#"*10 + "."*10 + "#"*10)])
def test_text_map(width, ref):
    assert text_map(make_checkerboard(), width) == ref

def test_check_invariants_catches_overlap():
    mem = make_checkerboard()
    check_invariants(mem)
    # corrupt the bookkeeping by hand
    mem.blocks[mem.free_list[0]].length = 15
    with pytest.raises(AssertionError):
        check_invariants(mem)
    with pytest.raises(AssertionError):
        occupancy(mem)

def test_check_invariants_catches_lost_words():
    mem = MemorySpace(10)
    mem.blocks[mem.free_list[0]].length = 9
    with pytest.raises(AssertionError):
        check_invariants(mem)

def test_check_invariants_catches_stale_handle():
    mem = MemorySpace(10)
    mem.free_list.append(mem.free_list[0])
    with pytest.raises(AssertionError):
        check_invariants(mem)
