from threebody.differential_equation import G
from threebody.differential_equation import SOFTENING
from threebody.differential_equation import DifferentialEquation
from threebody.differential_equation import SymbolicEquationSystem
from threebody.differential_equation import Symbols
from threebody.differential_equation import ThreeBodyGravitationalEquation
from threebody.differential_equation import acceleration
from threebody.differential_equation import derivative
from threebody.exceptions import InvalidInputError
from threebody.exceptions import NonConvergenceError
from threebody.exceptions import NumericOverflowError
from threebody.initial_condition import BodiesInitialCondition
from threebody.initial_condition import DiscreteInitialCondition
from threebody.initial_condition import InitialCondition
from threebody.initial_value_problem import InitialValueProblem
from threebody.operator import Operator
from threebody.operator import discretize_time_domain
from threebody.plot import AnimatedPlot
from threebody.plot import Plot
from threebody.plot import ThreeBodyPlot
from threebody.simulation import integrate
from threebody.solution import Diffs
from threebody.solution import Solution
from threebody.solution import TrajectoryBuffer
from threebody.state import DEFAULT_DURATION
from threebody.state import DEFAULT_SAVEAT
from threebody.state import N_BODIES
from threebody.state import SPATIAL_DIMENSION
from threebody.state import STATE_DIMENSION
from threebody.state import Body
from threebody.state import compose_state
from threebody.state import decompose_state
from threebody.state import default_bodies

__all__ = [
    "G",
    "SOFTENING",
    "Symbols",
    "SymbolicEquationSystem",
    "DifferentialEquation",
    "ThreeBodyGravitationalEquation",
    "acceleration",
    "derivative",
    "InvalidInputError",
    "NonConvergenceError",
    "NumericOverflowError",
    "InitialCondition",
    "DiscreteInitialCondition",
    "BodiesInitialCondition",
    "InitialValueProblem",
    "Operator",
    "discretize_time_domain",
    "Plot",
    "AnimatedPlot",
    "ThreeBodyPlot",
    "integrate",
    "Solution",
    "Diffs",
    "TrajectoryBuffer",
    "N_BODIES",
    "SPATIAL_DIMENSION",
    "STATE_DIMENSION",
    "DEFAULT_DURATION",
    "DEFAULT_SAVEAT",
    "Body",
    "compose_state",
    "decompose_state",
    "default_bodies",
]
