import itertools
import numbers
import os

FAILED = -1

def log(*args, **kwargs):
    WORDSPACE_LOG = int(os.getenv("WORDSPACE_LOG", "0"))
    if WORDSPACE_LOG:
        color_id = 6
        color0 = f"\033[0;{30+(color_id % 8)}m"
        color1 = f"\033[0m"
        print(color0, f"[{WORDSPACE_LOG=}] ", *args, color1, **kwargs)

class MemorySpaceError(Exception):
    pass

class EmptyAllocatedSet(MemorySpaceError):
    pass

class AddressNotFound(MemorySpaceError):
    pass

class MemoryBlock:
    def __init__(self, base, length):
        self.base = base
        self.length = length

    @property
    def end(self):
        return self.base + self.length

    def as_tuple(self):
        return (self.base, self.length)

    def __repr__(self):
        return f"({self.base}, {self.length})"

class MemorySpace:
    '''
    Bookkeeping for a managed space of `max_size` words.

    Blocks live in an arena keyed by handle; `free_list` and `allocated_list`
    hold handles in insertion order. Nothing is merged until `defrag()` is
    called explicitly.
    '''
    def __init__(self, max_size:int, strict = None):
        if isinstance(max_size, bool) or not isinstance(max_size, numbers.Integral) or max_size <= 0:
            raise ValueError(f"max_size must be a positive integer, got {max_size!r}")
        if strict is None:
            strict = bool(int(os.getenv("WORDSPACE_STRICT_FREE", "1")))
        self.max_size = int(max_size)
        self.strict = strict
        self.blocks = {}
        self.next_handle = 0
        self.allocated_list = []
        self.free_list = [self._new_block(0, self.max_size)]

    def _new_block(self, base, length):
        handle = self.next_handle
        self.next_handle += 1
        self.blocks[handle] = MemoryBlock(base, length)
        return handle

    @property
    def free_blocks(self):
        return [self.blocks[h].as_tuple() for h in self.free_list]

    @property
    def allocated_blocks(self):
        return [self.blocks[h].as_tuple() for h in self.allocated_list]

    @property
    def free_size(self):
        return sum(self.blocks[h].length for h in self.free_list)

    @property
    def allocated_size(self):
        return sum(self.blocks[h].length for h in self.allocated_list)

    def malloc(self, length:int) -> int:
        # a zero-length request still takes the base of the first free block
        if length < 0 or not self.free_list:
            return FAILED

        for index, handle in enumerate(self.free_list):
            current = self.blocks[handle]
            if current.length >= length:
                break
        else:
            log(f"malloc({length}) no fit in {self.free_blocks}")
            return FAILED

        address = current.base
        self.allocated_list.append(self._new_block(address, length))
        if current.length == length:
            del self.blocks[self.free_list.pop(index)]
            log(f"malloc({length}) took whole free block at {address}")
        else:
            # the remainder stays free at the tail of the original block
            current.base += length
            current.length -= length
            log(f"malloc({length}) split free block at {address}, remainder {current}")
        return address

    def free(self, address:int):
        if not self.allocated_list:
            raise EmptyAllocatedSet(f"Failed to free addr {address}, nothing is allocated")

        for index, handle in enumerate(self.allocated_list):
            if self.blocks[handle].base == address:
                break
        else:
            if self.strict:
                raise AddressNotFound(f"Failed to free, no allocated block at addr {address}")
            log(f"free({address}) ignored, no allocated block there")
            return

        self.free_list.append(self.allocated_list.pop(index))
        log(f"free({address}) released {self.blocks[handle]}")

    def defrag(self):
        if len(self.free_list) <= 1:
            return

        merged = True
        while merged:
            merged = False
            for i, j in itertools.permutations(range(len(self.free_list)), 2):
                head = self.blocks[self.free_list[i]]
                tail = self.blocks[self.free_list[j]]
                if head.end == tail.base:
                    log(f"defrag merges {head} with {tail}")
                    head.length += tail.length
                    del self.blocks[self.free_list.pop(j)]
                    merged = True
                    # indices are stale now, rescan from the start
                    break

    allocate = malloc
    release = free
    coalesce = defrag

    def render(self) -> str:
        free = " ".join(repr(self.blocks[h]) for h in self.free_list)
        allocated = " ".join(repr(self.blocks[h]) for h in self.allocated_list)
        return free + "\n" + allocated

    def __str__(self):
        return self.render()

    def __repr__(self):
        return f"MemorySpace(max_size={self.max_size}, free={self.free_blocks}, allocated={self.allocated_blocks})"
