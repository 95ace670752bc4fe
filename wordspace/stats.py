from collections import namedtuple
import itertools

import numpy as np

from .mem_space import MemorySpace

UNTRACKED = -1
FREE = 0
ALLOCATED = 1

FragStats = namedtuple("FragStats", "free_words allocated_words free_blocks allocated_blocks largest_free fragmentation")

def _cover(counts, blocks):
    for base, length in blocks:
        counts[base:base + length] += 1
    return counts

def coverage(space:MemorySpace) -> np.ndarray:
    counts = np.zeros(space.max_size, dtype=np.int32)
    _cover(counts, space.free_blocks)
    _cover(counts, space.allocated_blocks)
    return counts

def occupancy(space:MemorySpace) -> np.ndarray:
    # one entry per word: FREE, ALLOCATED or UNTRACKED
    counts = coverage(space)
    assert (counts <= 1).all(), f"overlapping blocks at words {np.nonzero(counts > 1)[0].tolist()}"
    words = np.full(space.max_size, UNTRACKED, dtype=np.int8)
    for base, length in space.free_blocks:
        words[base:base + length] = FREE
    for base, length in space.allocated_blocks:
        words[base:base + length] = ALLOCATED
    return words

def check_invariants(space:MemorySpace):
    for base, length in space.free_blocks + space.allocated_blocks:
        # malloc(0) records zero-length blocks
        assert length >= 0, f"block ({base}, {length}) has negative length"
        assert 0 <= base and base + length <= space.max_size, f"block ({base}, {length}) out of [0, {space.max_size})"

    for name, blocks in (("free", space.free_blocks), ("allocated", space.allocated_blocks)):
        counts = _cover(np.zeros(space.max_size, dtype=np.int32), blocks)
        assert (counts <= 1).all(), f"{name} blocks overlap: {blocks}"

    counts = coverage(space)
    assert (counts <= 1).all(), "free and allocated blocks overlap"
    total = space.free_size + space.allocated_size
    assert total == space.max_size, f"{total} words tracked, expected {space.max_size}"

    handles = space.free_list + space.allocated_list
    assert len(set(handles)) == len(handles), f"handle listed twice: {handles}"
    assert set(handles) == set(space.blocks), f"arena holds {sorted(space.blocks)}, lists hold {sorted(handles)}"

def is_coalesced(space:MemorySpace) -> bool:
    blocks = space.free_blocks
    return not any(blocks[i][0] + blocks[i][1] == blocks[j][0]
                   for i, j in itertools.permutations(range(len(blocks)), 2))

def fragmentation(space:MemorySpace) -> FragStats:
    free_lengths = np.array([length for _, length in space.free_blocks], dtype=np.int64)
    free_words = int(free_lengths.sum())
    largest_free = int(free_lengths.max()) if free_lengths.size else 0
    ratio = 1.0 - largest_free / free_words if free_words else 0.0
    return FragStats(free_words=free_words,
                     allocated_words=space.allocated_size,
                     free_blocks=len(space.free_list),
                     allocated_blocks=len(space.allocated_list),
                     largest_free=largest_free,
                     fragmentation=ratio)

def text_map(space:MemorySpace, width=64) -> str:
    assert width > 0
    width = min(width, space.max_size)
    words = occupancy(space)
    chars = []
    for bucket in np.array_split(words, width):
        if (bucket == FREE).all():
            chars.append(".")
        elif (bucket == ALLOCATED).all():
            chars.append("#")
        else:
            chars.append("+")
    return "".join(chars)
