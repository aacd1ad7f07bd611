"""
Forward and inverse 2D Fourier transforms.

Thin wrappers around numpy.fft that reject malformed input up front. The
solver only ever talks to the FFT through these three functions.
"""

import numpy as np


def _check_field(field, shape=None):
    arr = np.asarray(field)
    if arr.ndim != 2:
        raise ValueError(f"Expected a 2D field, got an array with shape {arr.shape}")
    if not np.issubdtype(arr.dtype, np.number):
        raise ValueError(f"Expected a numeric field, got dtype {arr.dtype}")
    if shape is not None and arr.shape != tuple(shape):
        raise ValueError(f"Field shape {arr.shape} does not match grid shape {tuple(shape)}")
    return arr


def forward(field, shape=None):
    """
    Forward 2D FFT of a real or complex field.

    Args:
        field (ndarray): Field in physical space (Nx, Ny)
        shape (tuple, optional): Expected grid shape

    Returns:
        ndarray: Complex coefficients (Nx, Ny)

    Raises:
        ValueError: If the field is not a 2D numeric array of the expected shape
    """
    return np.fft.fft2(_check_field(field, shape))


def inverse(field_hat, shape=None):
    """Inverse 2D FFT; the result is complex."""
    return np.fft.ifft2(_check_field(field_hat, shape))


def inverse_real(field_hat, shape=None):
    """
    Inverse 2D FFT of a quantity known to be real.

    The residual imaginary part left by round-off is discarded.
    """
    return np.real(inverse(field_hat, shape))
