# examples/coast_demo.py
import argparse
from pathlib import Path
from coasting_decay import DecayEnvironment, sample_coast

def parse_args():
    p = argparse.ArgumentParser("Tracer v(t) et d(t) d'un coast pour plusieurs vitesses initiales")
    p.add_argument("--r", type=float, default=0.95)
    p.add_argument("--vmin", type=float, default=0.1)
    p.add_argument("--v0", type=float, nargs="+", default=[2.0, 5.0, 10.0])
    p.add_argument("--points", type=int, default=100)
    p.add_argument("--plot", action="store_true")
    p.add_argument("--save-fig", type=str, default="out/coast_demo.png")
    p.add_argument("--dpi", type=int, default=180)
    return p.parse_args()

def main():
    a = parse_args()
    env = DecayEnvironment(r=a.r, vmin=a.vmin)
    curves = {v0: sample_coast(v0, env, a.points) for v0 in a.v0}

    if a.plot or a.save_fig:
        try:
            import matplotlib.pyplot as plt
        except ImportError:
            raise SystemExit("Installe matplotlib : python -m pip install matplotlib")
        fig, (ax_v, ax_d) = plt.subplots(1, 2, figsize=(10, 4))
        for v0, (t, v, d) in curves.items():
            ax_v.plot(t, v, label=f"v0={v0:g}")
            ax_d.plot(t, d, label=f"v0={v0:g}")
        ax_v.axhline(env.vmin, linewidth=1, linestyle="--")
        ax_v.set_xlabel("t (s)"); ax_v.set_ylabel("v(t)"); ax_v.set_title(f"Vitesse (r={env.r:g})")
        ax_d.set_xlabel("t (s)"); ax_d.set_ylabel("d(t)"); ax_d.set_title("Distance parcourue")
        for ax in (ax_v, ax_d):
            ax.grid(True); ax.legend()
        if a.save_fig:
            out = Path(a.save_fig); out.parent.mkdir(parents=True, exist_ok=True)
            plt.savefig(out, dpi=a.dpi, bbox_inches="tight")
        if a.plot and not a.save_fig: plt.show()
        plt.close(fig)
    else:
        for v0, (t, v, d) in curves.items():
            print(f"v0={v0:g}\tt_stop={t[-1]:.3f}\tdistance_stop={d[-1]:.3f}")

if __name__ == "__main__":
    main()
