from threebody.operators.ode.adaptive_rk_operator import AdaptiveRKOperator
from threebody.operators.ode.runge_kutta import (
    DormandPrinceMethod,
    EmbeddedRungeKuttaMethod,
    EmbeddedStep,
)

__all__ = [
    "AdaptiveRKOperator",
    "DormandPrinceMethod",
    "EmbeddedRungeKuttaMethod",
    "EmbeddedStep",
]
