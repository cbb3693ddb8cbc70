from __future__ import annotations

import numpy as np

from mbproj.models import KickedTopModel


def main() -> None:
    nkicks = 50
    for k in (0.5, 3.0, 6.0):
        model = KickedTopModel(j=20, k=k, p=np.pi / 2)
        psi0 = model.spin_coherent_state(theta=np.pi / 4, phi=np.pi / 3)
        traj = model.stroboscopic(psi0, nkicks)
        spread = np.linalg.norm(traj, axis=1)

        print(f"k = {k}")
        print("  <J>/j after last kick:", np.round(traj[-1], 3))
        print("  min |<J>|/j over trajectory:", round(float(spread.min()), 3))
        print("  quasienergies (first 5):", np.round(model.quasienergies()[:5], 3))


if __name__ == "__main__":
    main()
