"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Pure ordering logic for final groups. No I/O.
"""
from typing import List
from identical_files.core.models import Group


class Sorter:
    """
    Orders final groups ascending and deterministically.
    Default key:        (size, digest, count)
    By frequency key:   (count, size, digest)
    A missing digest orders as the empty string. The sort is stable, so groups
    with equal keys keep their incoming order. Paths inside a group are untouched.
    """

    @staticmethod
    def sort_groups(groups: List[Group], sort_by_frequency: bool = False) -> List[Group]:
        if not groups:
            return groups

        if sort_by_frequency:
            key_func = lambda g: (g.count, g.key.size, g.key.sort_digest())
        else:
            key_func = lambda g: (g.key.size, g.key.sort_digest(), g.count)

        groups.sort(key=key_func)
        return groups
