import numpy as np


def list_if(x):
    if isinstance(x, list):
        return x
    if isinstance(x, tuple):
        return list(x)
    else:
        return [x]


def as_float_matrix(matrix, shape=None):
    """Coerces a nested sequence/ndarray into a float64 matrix, checking its shape if given"""
    mat = np.asarray(matrix, dtype=np.float64)
    if shape is not None and mat.shape != shape:
        raise ValueError(f'expected a matrix of shape {shape}, got {mat.shape}')
    return mat
