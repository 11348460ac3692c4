"""
Backend selection and management.

Provides a unified dense linear algebra interface for CPU (NumPy/SciPy) and
PyTorch (CUDA or CPU).
"""

import importlib.util

from .base import BackendBase
from .cpu_backend import CPUBackend
from .gpu_backend import PyTorchBackend

CPU_AVAILABLE = True

# torch is optional; the backend module imports it lazily
PYTORCH_AVAILABLE = importlib.util.find_spec("torch") is not None


def get_backend(backend='auto') -> BackendBase:
    """
    Get computational backend.

    Parameters
    ----------
    backend : str or BackendBase
        Backend selection:
        - 'auto': CPU. The projected problems are tiny, so device transfer
          would dominate any GPU speedup.
        - 'cpu': CPU with NumPy/SciPy (LAPACK)
        - 'pytorch': PyTorch, on CUDA if available
        A BackendBase instance is returned unchanged.

    Returns
    -------
    BackendBase
        Backend instance

    Examples
    --------
    >>> backend = get_backend('cpu')
    >>> backend = get_backend('pytorch')  # requires torch
    """
    if isinstance(backend, BackendBase):
        return backend

    if backend in ('auto', 'cpu'):
        return CPUBackend()

    elif backend == 'pytorch':
        if not PYTORCH_AVAILABLE:
            raise RuntimeError(
                "PyTorch backend unavailable.\n"
                "Install: pip install torch"
            )
        return PyTorchBackend()

    else:
        raise ValueError(
            f"Unknown backend: '{backend}'\n"
            f"Valid options: 'auto', 'cpu', 'pytorch'"
        )


def list_available_backends() -> list:
    """List names of available backends."""
    backends = []
    if CPU_AVAILABLE:
        backends.append('cpu')
    if PYTORCH_AVAILABLE:
        backends.append('pytorch')
    return backends


def print_backend_info():
    """Print detailed backend information (diagnostic)."""
    print("pyprojls Backend Status")
    print("=" * 50)
    print(f"\nAvailable Backends:")
    print(f"  CPU (NumPy/SciPy): {'✓' if CPU_AVAILABLE else '✗'} - LAPACK triangular/SVD/least-squares")
    print(f"  PyTorch:           {'✓' if PYTORCH_AVAILABLE else '✗'} - torch.linalg on CUDA or CPU")

    print(f"\nDefault Backend:")
    try:
        backend = get_backend('auto')
        info = backend.get_device_info()
        print(f"  {backend.name} ({info['library']})")
    except Exception as e:
        print(f"  Error: {e}")


# Export main interface
__all__ = [
    'get_backend',
    'list_available_backends',
    'print_backend_info',
    'BackendBase',
    'CPUBackend',
    'PyTorchBackend',
    'CPU_AVAILABLE',
    'PYTORCH_AVAILABLE',
]


if __name__ == "__main__":
    print_backend_info()
