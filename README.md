# softbuiltins

Software implementations of the low-level routines a compiler runtime
supplies: IEEE-754 single and double precision arithmetic done with integer
operations on bit patterns, integer/float conversions, ARM EABI division and
memory helpers, and sub-word atomics emulated on a word-sized
compare-and-swap. A further module selects build `cfg` flags and the C
intrinsic sources a target triple needs.

Operations work on the real bit patterns, so NaN payloads, signed zeros,
rounding and saturation follow the runtime routines rather than the host's
floating-point unit.

## Installation

```
pip install softbuiltins
```

To run the test suite, install the `test` extra and run pytest:

```
pip install "softbuiltins[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `softbuiltins.formats` | `FloatFormat` (`to_bits`, `from_bits`, `signed_repr`, `from_parts`, `normalize`, `round`), the formats `F32` and `F64`, `leading_zeros`, `eq_repr` |
| `softbuiltins.add` | `add`, `addsf3`, `adddf3`, `subsf3`, `subdf3` |
| `softbuiltins.mul` | `mul`, `mulsf3`, `muldf3` |
| `softbuiltins.div` | `divsf3`, `divdf3` |
| `softbuiltins.powi` | `powi`, `powisf2`, `powidf2` |
| `softbuiltins.compare` | `Ordering`, `compare`, `unordered`, `lesf2` … `gtdf2`, `aeabi_fcmp*`, `aeabi_dcmp*` |
| `softbuiltins.conv` | `int_to_float`, `float_to_int`, `floatsisf` … `floatuntidf`, `fixsfsi` … `fixunsdfti` |
| `softbuiltins.extend` | `extend`, `extendsfdf2` |
| `softbuiltins.aeabi` | `aeabi_uidivmod`, `aeabi_uldivmod`, `aeabi_idivmod`, `aeabi_ldivmod`, `aeabi_memcpy*`, `aeabi_memmove*`, `aeabi_memset*`, `aeabi_memclr*` |
| `softbuiltins.atomics` | `AtomicMemory`, `align_address`, `get_shift_mask`, `extract_aligned`, `insert_aligned` |
| `softbuiltins.buildcfg` | `Sources`, `BuildError`, `target_cfgs`, `compiler_rt_sources`, `build_directives` |

## Examples

```python
from softbuiltins.add import adddf3
from softbuiltins.mul import mulsf3
from softbuiltins.compare import ledf2
from softbuiltins.conv import fixdfsi, floatundidf

adddf3(0.1, 0.2)           # 0.30000000000000004
mulsf3(1.5, 3.0)           # 4.5, computed in single precision
ledf2(1.0, float("nan"))   # 1 (unordered)
fixdfsi(1e100)             # 2147483647, saturated
floatundidf(2**64 - 1)     # 1.8446744073709552e+19
```

Conversions reject integers that do not fit the named integer type with
`ValueError`. Division flushes results below the normal range to a signed
zero. `powi` rounds to the chosen format after every multiplication.

The ARM division helpers return `(quotient, remainder)` pairs and raise
`ZeroDivisionError` for a zero divisor; signed division truncates towards
zero and wraps like two's complement:

```python
from softbuiltins.aeabi import aeabi_idivmod, aeabi_memset4

aeabi_idivmod(-7, 2)       # (-3, -1)

buffer = bytearray(8)
aeabi_memset4(buffer, 8, 0xAB)
```

Sub-word atomics operate on an `AtomicMemory`, a byte-addressed buffer whose
size (or initial contents) is given when it is created:

```python
from softbuiltins.atomics import AtomicMemory

memory = AtomicMemory(16)
memory.fetch_and_add(1, 1, 5)            # 0, the previous byte value
memory.compare_and_swap(1, 1, 5, 9)      # 5, the value seen; the byte is now 9
```

The build-configuration helpers compute the `cfg` flags and compiler-rt
sources for a target triple:

```python
from softbuiltins.buildcfg import target_cfgs, compiler_rt_sources

target_cfgs("thumbv6m-none-eabi")        # ['thumb', 'thumb_1']
sources = compiler_rt_sources(["x86_64", "unknown", "linux", "gnu"],
                              "x86_64", "gnu", "linux", "unknown", False)
sources["__floatdisf"]                   # 'x86_64/floatdisf.c'
```

## What this package does not do

- `buildcfg` only decides which sources and flags a build needs and returns
  the directive lines; it does not invoke a compiler or build anything.
  `build_directives` reads the `CARGO_CFG_TARGET_*` and
  `RUST_COMPILER_RT_ROOT` environment variables when C sources are requested
  and raises `BuildError` if they are missing.
- `AtomicMemory` emulates memory inside the Python process; it does not touch
  real hardware addresses or kernel helpers.
- There is no command-line program; everything is used as a library.