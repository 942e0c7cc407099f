from __future__ import annotations

from typing import Any

from boundwire.exceptions import SelfAliasError


class Aliaser:
    """Map alternate identifiers to a canonical identifier.

    Besides the forward ``alias -> abstract`` table, the reverse
    ``abstract -> [aliases]`` lists are kept so contextual bindings registered
    under an alias can be found from the canonical identifier.
    """

    def __init__(self) -> None:
        self._aliases: dict[Any, Any] = {}
        self._abstract_aliases: dict[Any, list[Any]] = {}

    def alias(self, abstract: Any, alias: Any) -> None:
        if alias == abstract:
            raise SelfAliasError(abstract)

        self._aliases[alias] = abstract
        self._abstract_aliases.setdefault(abstract, []).append(alias)

    def is_alias(self, name: Any) -> bool:
        return name in self._aliases

    def get_alias(self, abstract: Any) -> Any:
        """Follow the alias chain of ``abstract`` down to its canonical identifier.

        Raises:
            SelfAliasError: If the chain leads back to an identifier already visited.

        """
        chain = [abstract]
        current = abstract
        while current in self._aliases:
            target = self._aliases[current]
            if target == current:
                raise SelfAliasError(current)
            if target in chain:
                raise SelfAliasError(target, [*chain[chain.index(target) :], target])
            chain.append(target)
            current = target
        return current

    def forget_alias(self, abstract: Any) -> None:
        self._aliases.pop(abstract, None)

    def forget_aliases(self) -> None:
        self._aliases.clear()

    def forget_abstract_aliases(self) -> None:
        self._abstract_aliases.clear()

    def remove_abstract_alias(self, searched: Any) -> None:
        """Remove ``searched`` from every reverse alias list."""
        if searched not in self._aliases:
            return

        for abstract, aliases in self._abstract_aliases.items():
            self._abstract_aliases[abstract] = [alias for alias in aliases if alias != searched]

    def abstract_aliases(self, abstract: Any) -> list[Any]:
        return self._abstract_aliases.get(abstract, [])
