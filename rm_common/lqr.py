"""Continuous-time linear quadratic regulator."""

import numpy as np

__all__ = ["solve_riccati_arimoto_potter", "Lqr"]


def _matrix(value) -> np.ndarray:
    m = np.array(value, dtype=float)
    if m.ndim != 2:
        raise ValueError(f"expected a two-dimensional matrix, got shape {m.shape}")
    return m


def solve_riccati_arimoto_potter(a, b, q, r) -> np.ndarray:
    """Solve the continuous algebraic Riccati equation from the Hamiltonian's stable eigenvectors."""
    a, b, q, r = (_matrix(m) for m in (a, b, q, r))
    dim_x = a.shape[0]
    ham = np.block([
        [a, -b @ np.linalg.inv(r) @ b.T],
        [-q, -a.T],
    ])
    eigenvalues, eigenvectors = np.linalg.eig(ham)
    stable = eigenvectors[:, eigenvalues.real < 0.0]
    if stable.shape[1] != dim_x:
        raise ValueError(
            f"Hamiltonian has {stable.shape[1]} stable eigenvalues, expected {dim_x}"
        )
    vs_1 = stable[:dim_x, :]
    vs_2 = stable[dim_x:, :]
    return (vs_2 @ np.linalg.inv(vs_1)).real


class Lqr:
    """Gain computation for the system ``x' = A x + B u`` with costs ``Q`` and ``R``."""

    def __init__(self, a, b, q, r) -> None:
        self._a = _matrix(a)
        self._b = _matrix(b)
        self._q = _matrix(q)
        self._r = _matrix(r)
        n_rows, n_cols = self._a.shape
        if n_rows != n_cols:
            raise ValueError("lqr: A should be square matrix")
        if self._b.shape[0] != n_rows:
            raise ValueError("lqr: B rows should be equal to A rows")
        if self._q.shape != self._a.shape:
            raise ValueError("lqr: The rows and columns of Q should be equal to A")
        controls = self._b.shape[1]
        if self._r.shape != (controls, controls):
            raise ValueError("lqr: The rows and columns of R should be equal to the cols of B")
        self._k = np.zeros((controls, n_rows))

    def compute_k(self) -> None:
        """Compute the feedback gain; Q must be symmetric positive semi-definite and R positive definite."""
        if not np.array_equal(self._q, self._q.T):
            raise ValueError("lqr: Q must be symmetric")
        if not np.array_equal(self._r, self._r.T):
            raise ValueError("lqr: R must be symmetric")
        if np.any(np.linalg.eigvalsh(self._q) < 0.0):
            raise ValueError("lqr: Q must be positive semi-definite")
        if np.any(np.linalg.eigvalsh(self._r) <= 0.0):
            raise ValueError("lqr: R must be positive definite")
        p = solve_riccati_arimoto_potter(self._a, self._b, self._q, self._r)
        self._k = np.linalg.inv(self._r) @ (self._b.T @ p.T)

    @property
    def k(self) -> np.ndarray:
        """The feedback gain matrix (zero until :meth:`compute_k` succeeds)."""
        return self._k.copy()