import argparse


def create_trace(path: str, n: int = 32, base: int = 0x30_2000, elem_size: int = 4):
    """Writes a valgrind-style trace of a naive n x n matrix transpose B = A^T.

    Row-major A is read row by row while B is written column by column, which
    gives a good mix of hits, conflict misses and evictions.
    """
    a_base = base
    b_base = base + n * n * elem_size
    with open(path, "w") as f:
        f.write(f"I {0x400000:08x},5\n")
        for i in range(n):
            for j in range(n):
                f.write(f"I {0x400005:08x},3\n")
                f.write(f" L {a_base + (i * n + j) * elem_size:x},{elem_size}\n")
                f.write(f" S {b_base + (j * n + i) * elem_size:x},{elem_size}\n")
        # Scale the first element in place
        f.write(f" M {b_base:x},{elem_size}\n")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Generate a matrix-transpose memory trace")
    parser.add_argument("-n", type=int, default=32, help="Matrix dimension")
    parser.add_argument("-o", "--output", default="traces/trans.trace", help="Output trace path")
    args = parser.parse_args()
    create_trace(args.output, n=args.n)
