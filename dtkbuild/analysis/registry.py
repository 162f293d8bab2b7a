"""Per-package registry of discovered module identifiers."""

from typing import Dict, Iterator, List, Set, Tuple


class _PackageModules:
    __slots__ = ("seen", "ordered")

    def __init__(self) -> None:
        self.seen: Set[str] = set()
        self.ordered: List[str] = []


class ModuleRegistry:
    """Insertion-ordered, duplicate-free module identifiers per package.

    Each package keeps a membership set next to its ordered list so
    duplicate checks are constant time.
    """

    def __init__(self) -> None:
        self._packages: Dict[str, _PackageModules] = {}

    def register(self, package: str, module_id: str) -> bool:
        """Add a module identifier under its package.

        Args:
            package: Package name.
            module_id: Absolute module identifier.

        Returns:
            True if the identifier was new, False if already registered.
        """
        entry = self._packages.get(package)
        if entry is None:
            entry = _PackageModules()
            self._packages[package] = entry

        if module_id in entry.seen:
            return False
        entry.seen.add(module_id)
        entry.ordered.append(module_id)
        return True

    def modules(self, package: str) -> Tuple[str, ...]:
        entry = self._packages.get(package)
        return tuple(entry.ordered) if entry else ()

    def packages(self) -> List[str]:
        return list(self._packages)

    def as_dict(self) -> Dict[str, List[str]]:
        """Return a copy of the registry as ``{package: [module ids]}``."""
        return {name: list(entry.ordered) for name, entry in self._packages.items()}

    def __contains__(self, module_id: object) -> bool:
        return any(module_id in entry.seen for entry in self._packages.values())

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        for name, entry in self._packages.items():
            for module_id in entry.ordered:
                yield name, module_id

    def __len__(self) -> int:
        return sum(len(entry.ordered) for entry in self._packages.values())


__all__ = ["ModuleRegistry"]
