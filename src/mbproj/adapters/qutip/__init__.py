from mbproj.adapters.qutip.adapter import QuTiPAdapter

__all__ = ["QuTiPAdapter"]
