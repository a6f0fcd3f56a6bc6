"""结果可视化。"""

from .plotting import ConvergencePlotter, plot_convergence, plot_prestress_sweep

__all__ = ["ConvergencePlotter", "plot_convergence", "plot_prestress_sweep"]
