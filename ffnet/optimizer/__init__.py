from .UpdateRule import UpdateRule, get_update_rule
from .SGDOptimizer import SGDOptimizer
from .MomentumOptimizer import MomentumOptimizer
from .AdamWOptimizer import AdamWOptimizer

__all__ = [
    "UpdateRule",
    "get_update_rule",
    "SGDOptimizer",
    "MomentumOptimizer",
    "AdamWOptimizer",
]
