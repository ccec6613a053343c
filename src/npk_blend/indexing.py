"""Name-based indexing for CVXPY variables.

A :class:`Set` is an ordered collection of variable names; a
:class:`Variable` is a ``cp.Variable`` whose entries are addressed by the
names of its Set. :func:`coefficient_matrix` turns rows of
``(name, coefficient)`` terms into a sparse matrix over a Set, so a whole
block of linear constraints becomes one ``A @ x`` expression.

Example
-------
>>> amounts = Set(['amount_0', 'amount_1'], name='continuous')
>>> x = Variable(amounts, nonneg=True, name='x')
>>> A = coefficient_matrix([[('amount_0', 1.0), ('amount_1', 1.0)]], amounts)
>>> constraint = A @ x == 1000
"""

from __future__ import annotations

from typing import Hashable, Iterable, Sequence

import numpy as np
import scipy.sparse as sp

import cvxpy as cp


class Set:
    """An ordered set of elements for indexing variables.

    Parameters
    ----------
    elements : Iterable[Hashable]
        The elements of the index set, usually variable names.
    name : str, optional
        A name for this index set (used in error messages).

    Examples
    --------
    >>> used = Set(['used_0', 'used_1', 'used_2'], name='binary')
    >>> len(used)
    3
    >>> used.position('used_1')
    1
    """

    def __init__(self, elements: Iterable[Hashable], name: str | None = None):
        self._elements = list(elements)
        self._name = name or f"Set_{id(self)}"
        self._pos = {e: i for i, e in enumerate(self._elements)}
        if len(self._pos) != len(self._elements):
            raise ValueError(f"Set '{self._name}' contains duplicate elements")

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self):
        return iter(self._elements)

    def __contains__(self, elem: Hashable) -> bool:
        return elem in self._pos

    def __repr__(self) -> str:
        if len(self._elements) <= 5:
            elems = str(self._elements)
        else:
            elems = f"[{self._elements[0]!r}, ..., {self._elements[-1]!r}] ({len(self)} elements)"
        return f"Set({elems}, name={self._name!r})"

    @property
    def name(self) -> str:
        return self._name

    def position(self, elem: Hashable) -> int:
        """Return the integer position of an element.

        Raises
        ------
        KeyError
            If the element is not in the index.
        """
        if elem not in self._pos:
            raise KeyError(f"Element {elem!r} not in index '{self._name}'")
        return self._pos[elem]


class Variable(cp.Variable):
    """A CVXPY Variable indexed by a :class:`Set`.

    This class inherits from cp.Variable, so all CVXPY operations work
    natively. Attributes such as ``integer=True`` or ``boolean=True`` are
    passed through.

    Parameters
    ----------
    index : Set
        The index set for this variable.
    nonneg : bool, optional
        If True, constrain the variable to be non-negative.
    name : str, optional
        Name for the variable.
    **kwargs
        Additional keyword arguments passed to ``cp.Variable``.
    """

    def __init__(
        self,
        index: Set,
        nonneg: bool = False,
        name: str | None = None,
        **kwargs,
    ):
        if len(index) == 0:
            raise ValueError(f"Cannot create a variable over empty index '{index.name}'")
        self._set_index = index
        super().__init__(len(index), nonneg=nonneg, name=name, **kwargs)

    @property
    def index(self) -> Set:
        """The Set indexing this variable."""
        return self._set_index

    def values_by_key(self) -> dict[Hashable, float]:
        """Return all solved values keyed by index element.

        Raises
        ------
        ValueError
            If the Variable has no solution.
        """
        if self.value is None:
            raise ValueError(
                f"Variable '{self.name()}' has no solution. Solve the problem first."
            )
        values = np.atleast_1d(self.value)
        return {elem: float(values[i]) for i, elem in enumerate(self._set_index)}

    def __repr__(self) -> str:
        return f"Variable(index={self._set_index.name!r}, shape={self.shape})"


def coefficient_matrix(
    rows: Sequence[Iterable[tuple[Hashable, float]]],
    index: Set,
) -> sp.csr_matrix:
    """Build a sparse coefficient matrix over ``index``.

    Parameters
    ----------
    rows : sequence of iterables of (element, coefficient)
        One entry per matrix row. Terms whose element is not in ``index``
        are skipped, so rows spanning several variable blocks can be split
        block by block.
    index : Set
        The column index.

    Returns
    -------
    sp.csr_matrix
        Matrix of shape (len(rows), len(index)). Repeated terms add up.
    """
    row_ids: list[int] = []
    cols: list[int] = []
    data: list[float] = []

    for r, terms in enumerate(rows):
        for elem, coef in terms:
            if elem in index:
                row_ids.append(r)
                cols.append(index.position(elem))
                data.append(float(coef))

    return sp.csr_matrix((data, (row_ids, cols)), shape=(len(rows), len(index)))
