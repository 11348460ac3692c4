"""
GPU backend using PyTorch.

Runs on CUDA when available, CPU otherwise. Precision follows the input
dtype (float32/64, complex64/128).
"""

import numpy as np
import warnings
from typing import Optional, Tuple

from .base import BackendBase
from ..exceptions import LogicError


class PyTorchBackend(BackendBase):
    """
    PyTorch backend.

    All computation happens on torch tensors; arrays are converted only
    at entry/exit.
    """

    def __init__(self, device: Optional[str] = None):
        """Initialize PyTorch backend."""
        self.name = "pytorch"

        try:
            import torch
            self.torch = torch
        except ImportError:
            raise ImportError(
                "PyTorch required for GPU backend. "
                "Install: pip install torch"
            )

        if device is None:
            if torch.cuda.is_available():
                device = 'cuda'
            else:
                warnings.warn("No CUDA GPU available, using CPU")
                device = 'cpu'

        self.device = torch.device(device)

    def _to_tensor(self, A: np.ndarray):
        return self.torch.from_numpy(np.ascontiguousarray(A)).to(self.device)

    def _to_numpy(self, t) -> np.ndarray:
        return t.cpu().numpy()

    def solve_triangular(self, R: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Triangular solve on device. No rank checks."""
        torch = self.torch
        R_t = torch.triu(self._to_tensor(R))
        b_t = self._to_tensor(b)
        x = torch.linalg.solve_triangular(R_t, b_t, upper=True)
        return self._to_numpy(x)

    def lstsq(self, A: np.ndarray, b: np.ndarray) -> np.ndarray:
        """
        Least-squares solve via Householder QR.

        torch.linalg.lstsq only offers the 'gels' driver on CUDA, so use
        QR + triangular solve, which behaves the same on every device.
        """
        torch = self.torch
        A_t = self._to_tensor(A)
        b_t = self._to_tensor(b)
        n = A_t.shape[1]
        Q, R = torch.linalg.qr(A_t, mode='reduced')
        qtb = Q.conj().transpose(-2, -1) @ b_t
        x = torch.linalg.solve_triangular(R[:n, :n], qtb[:n], upper=True)
        return self._to_numpy(x)

    def lstsq_min_norm(
        self,
        A: np.ndarray,
        b: np.ndarray,
        rcond: float
    ) -> Tuple[np.ndarray, int]:
        """Minimum-norm solution from an explicit SVD."""
        torch = self.torch
        A_t = self._to_tensor(A)
        b_t = self._to_tensor(b)
        try:
            U, S, Vh = torch.linalg.svd(A_t, full_matrices=False)
        except RuntimeError as exc:
            raise LogicError(f"SVD failed on {self.device}: {exc}") from exc

        if S.numel() == 0 or S[0] == 0:
            rank = 0
        else:
            rank = int(torch.sum(S > rcond * S[0]).item())

        x = torch.zeros((A_t.shape[1], b_t.shape[1]), dtype=b_t.dtype, device=self.device)
        if rank > 0:
            coeffs = (U[:, :rank].conj().transpose(-2, -1) @ b_t) / S[:rank].unsqueeze(1)
            x = Vh[:rank].conj().transpose(-2, -1) @ coeffs.to(b_t.dtype)
        return self._to_numpy(x), rank

    def singular_values(self, A: np.ndarray) -> np.ndarray:
        """Singular values on device."""
        try:
            S = self.torch.linalg.svdvals(self._to_tensor(A))
        except RuntimeError as exc:
            raise LogicError(f"SVD failed on {self.device}: {exc}") from exc
        return self._to_numpy(S)

    def get_device_info(self) -> dict:
        """Get backend information."""
        return {
            'backend': 'gpu' if self.device.type == 'cuda' else 'cpu',
            'device': str(self.device),
            'library': f'PyTorch {self.torch.__version__}',
        }
