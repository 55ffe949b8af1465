# helpers/Backend.py
import numpy as np


class Backend:
    """Thin linear-algebra facade over NumPy used by every layer and loss."""
    def __init__(self, default_float=np.float64):
        self.default_float = default_float
        self.xp = np

    def ensure_array(self, x, dtype=None, copy=False):
        """
        Ensure 'x' is a backend array of a floating dtype.
        Accepts scalars, lists, tuples and arrays.
        """
        if dtype is None:
            dtype = self.default_float
        if isinstance(x, np.ndarray) and x.dtype == dtype:
            return x.copy() if copy else x
        return np.array(x, dtype=dtype, copy=True) if copy else np.asarray(x, dtype=dtype)

    def as_matrix(self, x, dtype=None):
        """Promote scalars and vectors to a (1, n) row matrix."""
        arr = self.ensure_array(x, dtype=dtype)
        if arr.ndim == 0:
            return arr.reshape(1, 1)
        if arr.ndim == 1:
            return arr.reshape(1, -1)
        return arr

    def copy(self, x):
        return None if x is None else np.array(x, copy=True)

    # -------- array creation --------
    def zeros_like(self, x):  return self.xp.zeros_like(x)
    def ones_like(self, x):   return self.xp.ones_like(x)

    # -------- math / linalg (thin wrappers) --------
    def sqrt(self, x):      return self.xp.sqrt(x)
    def maximum(self, a, b):return self.xp.maximum(a, b)
    def sum(self, x, axis=None, keepdims=False):  return self.xp.sum(x, axis=axis, keepdims=keepdims)
    def mean(self, x, axis=None, keepdims=False): return self.xp.mean(x, axis=axis, keepdims=keepdims)
    def max(self, x, axis=None, keepdims=False):  return self.xp.max(x, axis=axis, keepdims=keepdims)
    def exp(self, x):                              return self.xp.exp(x)
    def log(self, x):                              return self.xp.log(x)
    def log1p(self, x):                            return self.xp.log1p(x)
    def tanh(self, x):                             return self.xp.tanh(x)
    def abs(self, x):                              return self.xp.abs(x)
    def sign(self, x):                             return self.xp.sign(x)
    def where(self, cond, a, b):                   return self.xp.where(cond, a, b)
    def transpose(self, x, axes=None):            return self.xp.transpose(x, axes)
    def reshape(self, x, shape):                   return self.xp.reshape(x, shape)
    def matmul(self, a, b):                        return self.xp.matmul(a, b)

    # -------- randomness --------
    def rng(self, seed=None):
        """Independent generator so layers never share hidden RNG state."""
        return self.xp.random.default_rng(seed)

    # -------- delegate unknown attrs to xp --------
    def __getattr__(self, name):
        return getattr(self.xp, name)


# Global backend instance
backend = Backend()
