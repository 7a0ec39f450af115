from typing import Callable, Iterable

from flowfill.types import V_T


########################## Misc #########################
def make_default(value: V_T | None, default: V_T) -> V_T:
    """
    If the `value` is None this returns `default` else it returns `value`

    `make_default(interval, 0.05)`
    """
    return default if value is None else value


def intersperse(xs: Iterable[V_T], y: V_T) -> list[V_T]:
    """
    Returns a copy of xs in which y has been put between the elements.

    `intersperse([1, 2, 3], 0) == [1, 0, 2, 0, 3]`
    """
    rv: list[V_T] = []
    for x in xs:
        if rv:
            rv.append(y)
        rv.append(x)
    return rv


def group_by_bool(
    l: Iterable[V_T], key: Callable[[V_T], bool]
) -> tuple[list[V_T], list[V_T]]:
    """
    Group a list into two lists depending on the bool value given by the key
    """
    true = []
    false = []
    for x in l:
        if key(x):
            true.append(x)
        else:
            false.append(x)
    return true, false
