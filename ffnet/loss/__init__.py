from .LossRegistry import LossPair, LossRegistry, DEFAULT_LOSSES

__all__ = ["LossPair", "LossRegistry", "DEFAULT_LOSSES"]
