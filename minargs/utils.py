from typing import TypeVar, cast, Optional, Union

T = TypeVar('T')


def uniq(l: list[str]) -> list[str]:
    result: list[str] = []
    for i in l:
        if i in result:
            result.remove(i)
        result.append(i)
    return result


def asList(i: Optional[Union[T, list[T]]]) -> list[T]:
    if i is None:
        return []
    if isinstance(i, list):
        return cast(list[T], i)
    return [i]


def compact(i: Optional[Union[str, list[str]]]) -> list[str]:
    """Drops empty values and duplicates, keeping the last occurrence."""
    return uniq([v for v in asList(i) if v])


def asStr(v: Union[str, list[str]]) -> str:
    if isinstance(v, list):
        return v[-1] if v else ""
    return v
