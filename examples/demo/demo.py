"""Demo of generated propagation methods on a dataclass.

Run with:
    python examples/demo/demo.py
"""

from __future__ import annotations

from dataclasses import dataclass

from dynastruct.contracts import NamingConfig
from dynastruct.runtime import dynamic, dynamic_struct, refresh


@dynamic_struct
@dataclass
class Demo:
    a: int
    b: int
    c: int = dynamic(("a", "b"), "calc_c", default=0)
    d: int = dynamic("c", "calc_d", default=0)

    def __post_init__(self) -> None:
        refresh(self)

    def calc_c(self) -> None:
        self.c = self.a + self.b

    def calc_d(self) -> None:
        self.d = self.c * 2


@dynamic_struct(naming=NamingConfig(setter_prefix="set_", setter_suffix="_value"))
@dataclass
class Diamond:
    A: int = 0
    B: int = dynamic("A", "calc_b", default=0)
    C: int = dynamic("A", "calc_c", default=0)
    D: int = dynamic(("B", "C"), "calc_d", default=0)
    d_runs: int = 0

    def calc_b(self) -> None:
        self.B = self.A + 1

    def calc_c(self) -> None:
        self.C = self.A * 10

    def calc_d(self) -> None:
        self.d_runs += 1
        self.D = self.B + self.C


def main() -> None:
    demo = Demo(a=1, b=2)
    print(f"start:        c={demo.c} d={demo.d}")

    demo.update_a(10)  # type: ignore[attr-defined]
    print(f"update_a(10): c={demo.c} d={demo.d}")

    demo.update_b(5)  # type: ignore[attr-defined]
    print(f"update_b(5):  c={demo.c} d={demo.d}")

    diamond = Diamond()
    diamond.set_A_value(3)  # type: ignore[attr-defined]
    # D sits below both B and C, so nested propagation computes it twice
    print(f"set_A_value(3): D={diamond.D} (calc_d ran {diamond.d_runs} times)")


if __name__ == "__main__":
    main()
