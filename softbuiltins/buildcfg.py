"""Build configuration: target cfg flags and the C intrinsic sources to compile.

The directives produced here follow the ``cargo:`` line protocol of a build
script.  Choosing which compiler-rt sources provide which symbols is done in
pure Python; the sources are not compiled here.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path

__all__ = [
    "BuildError",
    "Sources",
    "target_cfgs",
    "compiler_rt_sources",
    "build_directives",
]


class BuildError(RuntimeError):
    """The build environment is missing something the configuration needs."""


class Sources:
    """A mapping from intrinsic symbol to the source file that implements it.

    Architecture-specific sources (those with a directory part) replace a
    generic one for the same symbol; a generic source never replaces anything.
    Iteration is in symbol order.
    """

    def __init__(self, sources: Iterable[tuple[str, str]] = ()) -> None:
        self._map: dict[str, str] = {}
        self.extend(sources)

    def extend(self, sources: Iterable[tuple[str, str]]) -> None:
        """Add ``(symbol, source)`` pairs, preferring optimised sources."""
        for symbol, src in sources:
            if "/" in src:
                self._map[symbol] = src
            else:
                self._map.setdefault(symbol, src)

    def remove(self, symbols: Iterable[str]) -> None:
        """Remove the given symbols; every one of them must be present."""
        for symbol in symbols:
            if symbol not in self._map:
                raise KeyError(f"no source registered for {symbol}")
            del self._map[symbol]

    def items(self) -> list[tuple[str, str]]:
        """Return the ``(symbol, source)`` pairs in symbol order."""
        return sorted(self._map.items())

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._map))

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._map

    def __getitem__(self, symbol: str) -> str:
        return self._map[symbol]

    def __repr__(self) -> str:
        return f"Sources({self.items()!r})"


def _uses_own_runtime(target: str) -> bool:
    return "emscripten" in target or "openbsd" in target


def _memory_cfgs(target: str) -> list[str]:
    wasm_without_libc = "wasm32" in target and "wasi" not in target
    fortanix_sgx = "sgx" in target and "fortanix" in target
    return ['feature="mem"'] if wasm_without_libc or fortanix_sgx else []


def _arch_cfgs(target: str) -> list[str]:
    arch = target.split("-")[0]
    cfgs = []
    if arch.startswith("thumb"):
        cfgs.append("thumb")
    if arch in ("thumbv6m", "thumbv8m.base"):
        cfgs.append("thumb_1")
    if arch in ("armv4t", "armv5te"):
        cfgs.append("kernel_user_helpers")
    return cfgs


def target_cfgs(target: str) -> list[str]:
    """Return the ``rustc-cfg`` flags set for a target triple.

    Targets whose runtime already supplies the builtins get none.
    """
    if _uses_own_runtime(target):
        return []
    return _memory_cfgs(target) + _arch_cfgs(target)


def _table(files: str, directory: str = "", prefix: str = "__") -> list[tuple[str, str]]:
    """Build ``(symbol, path)`` pairs from whitespace-separated file names.

    A name without an extension is a C file.  The symbol is the file stem
    with ``prefix`` in front.
    """
    pairs = []
    for name in files.split():
        if "." not in name:
            name += ".c"
        stem = name.rsplit(".", 1)[0]
        path = f"{directory}/{name}" if directory else name
        pairs.append((prefix + stem, path))
    return pairs


_BASE_SOURCES = _table(
    "absvdi2 absvsi2 addvdi3 addvsi3 clzdi2 clzsi2 cmpdi2 ctzdi2 ctzsi2"
    " divdc3 divsc3 divxc3 extendhfsf2 int_util muldc3 mulsc3 mulvdi3 mulvsi3"
    " mulxc3 negdf2 negdi2 negsf2 negvdi2 negvsi2 paritydi2 paritysi2"
    " popcountdi2 popcountsi2 powixf2 subvdi3 subvsi3 truncdfhf2 truncdfsf2"
    " truncsfhf2 ucmpdi2"
) + _table("apple_versioning", prefix="")

_TI_SOURCES = _table(
    "absvti2 addvti3 clzti2 cmpti2 ctzti2 ffsti2 mulvti3 negti2 negvti2"
    " parityti2 popcountti2 subvti3 ucmpti2"
)

_APPLE_SOURCES = _table(
    " ".join(
        f"atomic_{name}"
        for name in (
            "flag_clear",
            "flag_clear_explicit",
            "flag_test_and_set",
            "flag_test_and_set_explicit",
            "signal_fence",
            "thread_fence",
        )
    ),
    prefix="",
)

_X86_64_MSVC_SOURCES = _table("floatdisf floatdixf", "x86_64")

_X86_64_SOURCES = _X86_64_MSVC_SOURCES + _table(
    "floatundidf.S floatundisf.S floatundixf.S", "x86_64"
)

_I386_SOURCES = _table(
    " ".join(
        f"{name}.S"
        for name in (
            "ashldi3 ashrdi3 divdi3 floatdidf floatdisf floatdixf floatundidf"
            " floatundisf floatundixf lshrdi3 moddi3 muldi3 udivdi3 umoddi3"
        ).split()
    ),
    "i386",
)

_ARM_SOURCES = _table("aeabi_div0 aeabi_drsub aeabi_frsub", "arm") + _table(
    " ".join(
        f"{name}.S"
        for name in (
            "bswapdi2 bswapsi2 clzdi2 clzsi2 divmodsi4 divsi3 modsi3 switch16"
            " switch32 switch8 switchu8 sync_synchronize udivmodsi4 udivsi3 umodsi3"
        ).split()
    ),
    "arm",
)

_ARM_LITTLE_ENDIAN_SOURCES = _table(
    "aeabi_cdcmp.S aeabi_cdcmpeq_check_nan aeabi_cfcmp.S aeabi_cfcmpeq_check_nan", "arm"
)

_ARMV7_SYNC_SOURCES = _table(
    " ".join(
        f"sync_fetch_and_{op}_{width}.S"
        for op in ("add", "and", "max", "min", "nand", "or", "sub", "umax", "umin", "xor")
        for width in (4, 8)
    ),
    "arm",
)

_VFP_DOUBLE_SOURCES = _table(
    "fixdfsivfp.S fixunsdfsivfp.S floatsidfvfp.S floatunssidfvfp.S", "arm"
)

_VFP_SOURCES = _table(
    "fixsfsivfp.S fixunssfsivfp.S floatsisfvfp.S floatunssisfvfp.S"
    " restore_vfp_d8_d15_regs.S save_vfp_d8_d15_regs.S negdf2vfp.S negsf2vfp.S",
    "arm",
)

_AARCH64_SOURCES = _table(
    "comparetf2 extenddftf2 extendsftf2 fixtfdi fixtfsi fixtfti fixunstfdi"
    " fixunstfsi fixunstfti floatditf floatsitf floatunditf floatunsitf"
    " trunctfdf2 trunctfsf2"
)


def compiler_rt_sources(
    llvm_target: Sequence[str],
    target_arch: str,
    target_env: str,
    target_os: str,
    target_vendor: str,
    rustbuild: bool,
) -> Sources:
    """Choose the compiler-rt sources to build for a target.

    ``llvm_target`` is the target triple split on ``-``.
    """
    if not llvm_target:
        raise ValueError("empty target triple")
    arch = llvm_target[0]
    sources = Sources(_BASE_SOURCES)

    if rustbuild:
        sources.extend(_table("ffsdi2"))

    if target_os != "ios" and (target_vendor != "apple" or target_arch != "x86"):
        sources.extend(_TI_SOURCES)

    if target_vendor == "apple":
        sources.extend(_APPLE_SOURCES)

    if target_env == "msvc":
        if target_arch == "x86_64":
            sources.extend(_X86_64_MSVC_SOURCES)
    else:
        if target_os != "windows" and target_arch == "x86_64":
            sources.extend(_X86_64_SOURCES)
        if target_arch == "x86":
            sources.extend(_I386_SOURCES)

    if target_arch == "arm" and target_os != "ios" and target_env != "msvc":
        sources.extend(_ARM_SOURCES)
        if target_os == "freebsd":
            sources.extend(_table("clear_cache"))
        if not arch.startswith("thumbeb") and not arch.startswith("armeb"):
            sources.extend(_ARM_LITTLE_ENDIAN_SOURCES)

    if arch == "armv7":
        sources.extend(_ARMV7_SYNC_SOURCES)

    if llvm_target[-1].endswith("eabihf"):
        if not arch.startswith("thumbv7em") and not arch.startswith("thumbv8m.main"):
            sources.extend(_VFP_DOUBLE_SOURCES)
        sources.extend(_VFP_SOURCES)

    if target_arch == "aarch64":
        sources.extend(_AARCH64_SOURCES)
        if target_os != "windows":
            sources.extend(_table("multc3"))

    # Thumb-1 cannot assemble the .S implementations; fall back where possible.
    if arch in ("thumbv6m", "thumbv8m.base"):
        sources.remove([symbol for symbol, src in sources.items() if src.endswith(".S")])
        sources.extend(_table("clzdi2 clzsi2"))

    if arch in ("thumbv7m", "thumbv7em"):
        sources.remove(["__aeabi_cdcmp", "__aeabi_cfcmp"])

    return sources


def _require(env: Mapping[str, str], name: str) -> str:
    try:
        return env[name]
    except KeyError:
        raise BuildError(f"{name} is not set") from None


def _compile_directives(llvm_target: Sequence[str], env: Mapping[str, str]) -> list[str]:
    sources = compiler_rt_sources(
        llvm_target,
        _require(env, "CARGO_CFG_TARGET_ARCH"),
        _require(env, "CARGO_CFG_TARGET_ENV"),
        _require(env, "CARGO_CFG_TARGET_OS"),
        _require(env, "CARGO_CFG_TARGET_VENDOR"),
        "CARGO_FEATURE_RUSTBUILD" in env,
    )
    root = Path(_require(env, "RUST_COMPILER_RT_ROOT"))
    if not root.exists():
        raise BuildError(f"RUST_COMPILER_RT_ROOT={root} does not exist")

    src_dir = root / "lib" / "builtins"
    lines = []
    for symbol, src in sources.items():
        lines.append(f"cargo:rerun-if-changed={src_dir / src}")
        lines.append(f'cargo:rustc-cfg={symbol}="optimized-c"')
    return lines


def build_directives(
    target: str, cwd: str | os.PathLike[str], c_feature: bool, mangled_names: bool
) -> list[str]:
    """Return the build-script directive lines for ``target``.

    With ``c_feature`` set (and names not mangled) the compiler-rt sources are
    selected using the ``CARGO_CFG_TARGET_*`` and ``RUST_COMPILER_RT_ROOT``
    environment variables; BuildError is raised if they are missing.
    """
    lines = [
        "cargo:rerun-if-changed=build.rs",
        f"cargo:compiler-rt={Path(cwd) / 'compiler-rt'}",
    ]

    if "emscripten" in target:
        return lines
    if "openbsd" in target:
        lines.append("cargo:rustc-link-search=native=/usr/lib")
        lines.append("cargo:rustc-link-lib=compiler_rt")
        return lines

    lines.extend(f"cargo:rustc-cfg={cfg}" for cfg in _memory_cfgs(target))

    llvm_target = target.split("-")
    if not mangled_names and c_feature:
        uses_c_compiler = (
            "wasm32" not in target and "nvptx" not in target and not target.startswith("riscv")
        )
        if uses_c_compiler:
            lines.extend(_compile_directives(llvm_target, os.environ))

    lines.extend(f"cargo:rustc-cfg={cfg}" for cfg in _arch_cfgs(target))
    return lines