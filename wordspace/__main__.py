from .mem_space import MemorySpace, MemorySpaceError, log
from .stats import fragmentation, text_map
import argparse
import os
import sys

def parse_line(line, lineno):
    # returns (command, args) or None for blank/comment lines
    line = line.split("#", 1)[0].strip()
    if not line:
        return None
    words = line.split()
    cmd, args = words[0].lower(), words[1:]
    nargs = {"malloc":1, "allocate":1, "free":1, "release":1,
             "defrag":0, "coalesce":0, "show":0, "render":0, "stats":0, "map":None}
    if cmd not in nargs:
        raise Exception(f"line {lineno}: unknown command {cmd!r}")
    if nargs[cmd] is None:
        expected_ok = len(args) <= 1
    else:
        expected_ok = len(args) == nargs[cmd]
    if not expected_ok:
        raise Exception(f"line {lineno}: wrong number of arguments for {cmd}: {args}")
    try:
        args = [int(a, 0) for a in args]
    except ValueError:
        raise Exception(f"line {lineno}: expect integer arguments for {cmd}, got {args}")
    if cmd == "map" and args and args[0] < 1:
        raise Exception(f"line {lineno}: map width must be at least 1, got {args[0]}")
    return cmd, args

def run_script(lines, space, verbose=False):
    output = []
    for lineno, line in enumerate(lines, 1):
        parsed = parse_line(line, lineno)
        if parsed is None:
            continue
        cmd, args = parsed
        if verbose:
            print(f"> {line.strip()}")
        log(f"line {lineno}: {cmd} {args}")
        if cmd in ("malloc", "allocate"):
            output.append(str(space.malloc(args[0])))
        elif cmd in ("free", "release"):
            try:
                space.free(args[0])
            except MemorySpaceError as e:
                output.append(f"error: {e}")
        elif cmd in ("defrag", "coalesce"):
            space.defrag()
        elif cmd in ("show", "render"):
            output.extend(space.render().split("\n"))
        elif cmd == "stats":
            st = fragmentation(space)
            output.append(f"free={st.free_words} in {st.free_blocks} blocks, "
                          f"allocated={st.allocated_words} in {st.allocated_blocks} blocks, "
                          f"largest_free={st.largest_free}, fragmentation={st.fragmentation:.3f}")
        elif cmd == "map":
            output.append(text_map(space, *args))
    return output

def main(argv=None):
    # replay a script of allocator commands, one per line, e.g.
    #   malloc 20
    #   free 0
    #   defrag
    #   show
    parser = argparse.ArgumentParser(
            description="Replay memory space commands against a fresh address space",
            )
    parser.add_argument('input_file', nargs='?', help='command script, stdin if omitted')
    parser.add_argument('-s','--size', type=int, default=100, help='number of words in the space')
    parser.add_argument('--legacy-free', action="store_true", help='freeing an unknown address is a silent no-op')
    parser.add_argument('-v','--verbose', action="store_true", help='echo each command before running it')
    args = parser.parse_args(argv)

    space = MemorySpace(args.size, strict=False if args.legacy_free else None)

    if args.input_file is None:
        lines = sys.stdin.readlines()
    else:
        src_file_path = args.input_file
        if not os.path.isabs(src_file_path):
            src_file_path = os.path.join(os.getcwd(), src_file_path)
        with open(src_file_path) as file:
            lines = file.readlines()

    for out in run_script(lines, space, verbose=args.verbose):
        print(out)

if __name__ == "__main__":
    main()
