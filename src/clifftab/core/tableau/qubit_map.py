from typing import Iterable, Iterator
from clifftab._typing import QubitLabel
from clifftab.exceptions import UnknownQubitError


class QubitIndexMap:
    """
    Bijection between qubit labels and dense indices ``0..n-1``.

    Both directions are built together from one ordered sequence of labels and are never changed
    afterwards, so the map is safe to share between copies of a tableau.
    """

    __slots__ = ("_labels", "_indices")

    def __init__(self, labels: int | Iterable[QubitLabel]):
        if isinstance(labels, int):
            labels = range(labels)
        self._labels: tuple[QubitLabel, ...] = tuple(labels)
        self._indices: dict[QubitLabel, int] = {label: i for i, label in enumerate(self._labels)}
        if len(self._indices) != len(self._labels):
            raise ValueError(f"Qubit labels must be distinct, got {list(self._labels)}.")

    @property
    def labels(self) -> tuple[QubitLabel, ...]:
        return self._labels

    def index(self, label: QubitLabel) -> int:
        try:
            return self._indices[label]
        except KeyError:
            raise UnknownQubitError(f"Qubit {label!r} is not in the qubit map {list(self._labels)}.") from None
        except TypeError:
            # unhashable labels cannot be part of the map
            raise UnknownQubitError(f"Qubit {label!r} is not a valid qubit label.") from None

    def label(self, index: int) -> QubitLabel:
        return self._labels[index]

    def items(self) -> Iterator[tuple[int, QubitLabel]]:
        return iter(enumerate(self._labels))

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[QubitLabel]:
        return iter(self._labels)

    def __contains__(self, label) -> bool:
        try:
            return label in self._indices
        except TypeError:
            return False

    def __eq__(self, other) -> bool:
        if not isinstance(other, QubitIndexMap):
            return False
        return self._labels == other._labels

    def __hash__(self):
        return hash(self._labels)

    def __repr__(self):
        return f"QubitIndexMap({list(self._labels)})"
