# src/dynastruct/cli_formatters.py
"""CLI formatters for propagation chains.

Builds rich renderables that show which calls a setter or update function
makes, nested the way they execute at run time. In nested mode a diamond
shows up as the shared field appearing under each path that reaches it.
"""

from __future__ import annotations

from rich.tree import Tree

from dynastruct.contracts.emitted import FunctionDef
from dynastruct.contracts.enums import FunctionFamily
from dynastruct.core.generator import GenerationResult

_FAMILY_STYLES = {
    FunctionFamily.UPDATED: "cyan",
    FunctionFamily.SETTER: "green bold",
    FunctionFamily.UPDATE: "magenta",
}


def _label(fn: FunctionDef) -> str:
    style = _FAMILY_STYLES[fn.family]
    params = ", ".join(p.name for p in fn.parameters)
    return f"[{style}]{fn.name}[/]({params})  [dim]{fn.family.value} · {fn.field}[/]"


def _add_calls(node: Tree, fn: FunctionDef, by_name: dict[str, FunctionDef]) -> None:
    for method in fn.calls:
        callee = by_name.get(method)
        if callee is None:
            # Not generated: a user compute method
            node.add(f"[yellow]{method}[/]()  [dim]compute[/]")
            continue
        _add_calls(node.add(_label(callee)), callee, by_name)


def build_propagation_tree(result: GenerationResult, field: str) -> Tree:
    """Tree of calls made when ``field``'s setter or update function runs.

    Recursion terminates because the graph was validated acyclic.
    """
    by_name = {fn.name: fn for fn in result.functions}
    entry = result.entry_point(field)
    tree = Tree(_label(entry), guide_style="dim")
    _add_calls(tree, entry, by_name)
    return tree


def count_compute_calls(result: GenerationResult, field: str) -> dict[str, int]:
    """How many times each compute method runs when ``field`` changes.

    Counts follow the emitted call structure, so diamonds in nested mode
    count once per path. The entry point's own compute method is included
    for dynamic fields.
    """
    by_name = {fn.name: fn for fn in result.functions}
    counts: dict[str, int] = {}

    def visit(fn: FunctionDef) -> None:
        for method in fn.calls:
            callee = by_name.get(method)
            if callee is None:
                counts[method] = counts.get(method, 0) + 1
            else:
                visit(callee)

    visit(result.entry_point(field))
    return counts
