"""Pure cargo hold transformations.

Every helper takes a sequence of stacks and returns a fresh list; the input
is never modified. Stacks with zero quantity never survive a helper.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence

from tramp.domain.state import CargoStack


def cargo_used(cargo: Sequence[CargoStack]) -> int:
    return sum(stack.qty for stack in cargo)


def add_stack(cargo: Sequence[CargoStack], incoming: CargoStack) -> List[CargoStack]:
    """Merge into the first stack with the same good and buy price, else append."""
    updated = list(cargo)
    for index, stack in enumerate(updated):
        if stack.good == incoming.good and stack.buy_price == incoming.buy_price:
            updated[index] = replace(stack, qty=stack.qty + incoming.qty)
            return updated
    updated.append(incoming)
    return updated


def remove_from_stack(cargo: Sequence[CargoStack], index: int, qty: int) -> List[CargoStack]:
    """Take ``qty`` units from the stack at ``index``, dropping it at zero."""
    updated = list(cargo)
    stack = updated[index]
    remaining = stack.qty - qty
    if remaining < 0:
        raise ValueError("Cannot remove more units than the stack holds.")
    if remaining == 0:
        del updated[index]
    else:
        updated[index] = replace(stack, qty=remaining)
    return updated


def find_stack_index(cargo: Sequence[CargoStack], good: str) -> int | None:
    for index, stack in enumerate(cargo):
        if stack.good == good:
            return index
    return None


def quantity_of(cargo: Sequence[CargoStack], good: str) -> int:
    return sum(stack.qty for stack in cargo if stack.good == good)


def take_good(
    cargo: Sequence[CargoStack], good: str, qty: int
) -> tuple[List[CargoStack], List[CargoStack]]:
    """Remove ``qty`` units of a good, oldest stacks first.

    Returns ``(remaining_cargo, removed_stacks)``; removed stacks keep their
    purchase metadata so they can be placed elsewhere unchanged.
    """
    if qty > quantity_of(cargo, good):
        raise ValueError(f"Not enough {good} in cargo.")
    remaining: List[CargoStack] = []
    removed: List[CargoStack] = []
    outstanding = qty
    for stack in cargo:
        if stack.good != good or outstanding == 0:
            remaining.append(stack)
            continue
        taken = min(stack.qty, outstanding)
        outstanding -= taken
        removed.append(replace(stack, qty=taken))
        if stack.qty > taken:
            remaining.append(replace(stack, qty=stack.qty - taken))
    return remaining, removed
