"""Linear Kalman filter."""

import numpy as np

__all__ = ["KalmanFilter"]


def _matrix(value) -> np.ndarray:
    m = np.array(value, dtype=float)
    if m.ndim != 2:
        raise ValueError(f"expected a two-dimensional matrix, got shape {m.shape}")
    return m


class KalmanFilter:
    """Discrete Kalman filter for ``x' = A x + B u``, ``z = H x``."""

    def __init__(self, a, b, h, q, r) -> None:
        self._a = _matrix(a)
        self._b = _matrix(b)
        self._h = _matrix(h)
        self._q = _matrix(q)
        self._r = _matrix(r)
        n, cols = self._a.shape
        if n != cols:
            raise ValueError("A should be square matrix")
        if self._h.shape[1] != n:
            raise ValueError("H columns should be equal to A columns")
        if self._b.shape[0] != n:
            raise ValueError("B rows should be equal to A columns")
        if self._q.shape != (n, n):
            raise ValueError("The rows and columns of Q should be equal to the columns of A")
        m = self._h.shape[0]
        if self._r.shape != (m, m):
            raise ValueError("The rows and columns of R should be equal to the rows of H")
        self._n = n
        self._m = m
        self._identity = np.eye(n)
        self._x = np.zeros(n)
        self._p = np.zeros((n, n))
        self._p_new = np.zeros((n, n))
        self._k = np.zeros((n, m))
        self._initialised = False

    def clear(self, x) -> None:
        """Reset the filter to state ``x`` with zero covariance."""
        state = np.array(x, dtype=float).reshape(-1)
        if state.shape != (self._n,):
            raise ValueError(f"state must have {self._n} elements")
        self._x = state
        self._k = np.zeros((self._n, self._m))
        self._p = np.zeros((self._n, self._n))
        self._p_new = np.zeros((self._n, self._n))
        self._initialised = True

    def _require_initialised(self) -> None:
        if not self._initialised:
            raise RuntimeError("filter is not initialised; call clear() first")

    def update(self, z, r=None) -> None:
        """Correct the state with measurement ``z``, optionally replacing the noise ``R``."""
        self._require_initialised()
        if r is not None:
            self._r = _matrix(r)
        z = np.array(z, dtype=float).reshape(-1)
        h = self._h
        s = h @ self._p_new @ h.T + self._r
        self._k = self._p_new @ h.T @ np.linalg.inv(s)
        self._x = self._x + self._k @ (z - h @ self._x)
        self._p = (self._identity - self._k @ h) @ self._p_new

    def predict(self, u, q=None) -> None:
        """Propagate the state with input ``u``, optionally replacing the noise ``Q``."""
        self._require_initialised()
        if q is not None:
            self._q = _matrix(q)
        u = np.array(u, dtype=float).reshape(-1)
        self._x = self._a @ self._x + self._b @ u
        self._p_new = self._a @ self._p @ self._a.T + self._q

    @property
    def state(self) -> np.ndarray:
        """The current state estimate."""
        return self._x.copy()