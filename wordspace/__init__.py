from .mem_space import (FAILED, MemoryBlock, MemorySpace, MemorySpaceError,
                        EmptyAllocatedSet, AddressNotFound, log)
from .stats import (FREE, ALLOCATED, UNTRACKED, FragStats, coverage, occupancy,
                    check_invariants, is_coalesced, fragmentation, text_map)
