# helpers/logger.py
import csv, json, datetime, pathlib
import matplotlib.pyplot as plt


class RunLogger:
    def __init__(self, root="runs", tag="run"):
        ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        self.root = pathlib.Path(root)
        self.dir = self.root / f"{tag}_{ts}"
        self.dir.mkdir(parents=True, exist_ok=True)
        self.tag = tag
        self.csv_path = self.dir / "history.csv"
        self.json_path = self.dir / "history.json"
        self.metrics = []  # list of dicts per iteration
        self._csv_header_written = False

    # ---------- logging ----------
    def log_iteration(self, iteration, **kwargs):
        row = {"iteration": int(iteration), **{k: float(v) for k, v in kwargs.items()}}
        self.metrics.append(row)
        with open(self.csv_path, "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(row.keys()))
            if not self._csv_header_written:
                writer.writeheader()
                self._csv_header_written = True
            writer.writerow(row)

    def save_json(self, **extra):
        payload = {"tag": self.tag, "history": self.metrics, **extra}
        with open(self.json_path, "w") as f:
            json.dump(payload, f, indent=2)
        return str(self.json_path)

    # ---------- plotting ----------
    def _plots_dir(self, subdir):
        out = self.dir / subdir
        out.mkdir(parents=True, exist_ok=True)
        return out

    def plot_loss(self, losses=None, subdir="plots"):
        """
        Saves the training loss curve as loss_curve_<tag>.png.
        Uses the logged history when `losses` is not given.
        """
        if losses is None:
            losses = [row["loss"] for row in self.metrics if "loss" in row]
        losses = list(losses)

        outdir = self._plots_dir(subdir)
        path = outdir / f"loss_curve_{self.tag}.png"
        plt.figure()
        if len(losses) > 0:
            plt.plot(range(1, len(losses) + 1), losses, label="train loss")
            if all(v > 0 for v in losses):
                plt.yscale("log")
            plt.legend()
        plt.xlabel("Iteration")
        plt.ylabel("Scalar Loss")
        plt.title(f"Loss vs Iterations ({self.tag})")
        plt.tight_layout()
        plt.savefig(path, dpi=160)
        plt.close()
        return str(path)
