"""Token vocabulary with dense, first-seen index assignment."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator, Sequence
from typing import Optional

Label = Hashable
Token = Hashable
Example = tuple[Label, Sequence[Token]]


class Vocabulary:
    """Immutable bijection between tokens and indices in ``[0, V)``.

    Indices follow the order in which tokens were first seen, so identical
    input always produces identical indices.

    Example::

        vocab = Vocabulary.build([("spam", ["buy", "now"]), ("ham", ["now"])])
        vocab.index_of("now")   # 1
        vocab.token_at(0)       # "buy"
    """

    __slots__ = ("_tokens", "_index")

    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        ordered: list[Token] = []
        index: dict[Token, int] = {}
        for token in tokens:
            if token in index:
                raise ValueError(f"Duplicate token in vocabulary: {token!r}")
            index[token] = len(ordered)
            ordered.append(token)
        object.__setattr__(self, "_tokens", tuple(ordered))
        object.__setattr__(self, "_index", index)

    @classmethod
    def build(cls, examples: Iterable[Example]) -> "Vocabulary":
        """Collect every distinct token across ``examples`` in first-seen order."""
        seen: dict[Token, None] = {}
        for _label, features in examples:
            for token in features:
                if token not in seen:
                    seen[token] = None
        return cls(seen)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Vocabulary is immutable")

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, token: object) -> bool:
        try:
            return token in self._index
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vocabulary):
            return NotImplemented
        return self._tokens == other._tokens

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __repr__(self) -> str:
        return f"Vocabulary(size={len(self)})"

    @property
    def tokens(self) -> tuple[Token, ...]:
        """All tokens ordered by index."""
        return self._tokens

    def index_of(self, token: Token) -> Optional[int]:
        """Return the index of ``token`` or ``None`` if it is out of vocabulary."""
        try:
            return self._index.get(token)
        except TypeError:
            return None

    def token_at(self, index: int) -> Token:
        """Return the token stored at ``index``.

        Raises:
            IndexError: If ``index`` is outside ``[0, V)``.
        """
        if not 0 <= index < len(self._tokens):
            raise IndexError(f"Vocabulary index {index} out of range [0, {len(self._tokens)})")
        return self._tokens[index]


def build_vocabulary(examples: Iterable[Example]) -> Vocabulary:
    """Build a :class:`Vocabulary` from labeled feature sequences."""
    return Vocabulary.build(examples)
