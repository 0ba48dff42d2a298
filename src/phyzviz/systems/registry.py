from typing import Any, Callable, Dict, NamedTuple, Optional

from phyzviz.systems import double_pendulum, lorenz, simple_pendulum


class System(NamedTuple):
    name: str
    params_cls: type
    dimension: int
    derivative: Callable
    initial_state: Callable
    positions: Callable
    energy: Optional[Callable] = None


REGISTRY: Dict[str, System] = {
    "simple": System(
        name="simple",
        params_cls=simple_pendulum.SimplePendulumParams,
        dimension=simple_pendulum.DIMENSION,
        derivative=simple_pendulum.derivative,
        initial_state=simple_pendulum.initial_state,
        positions=simple_pendulum.positions,
        energy=simple_pendulum.energy,
    ),
    "double": System(
        name="double",
        params_cls=double_pendulum.DoublePendulumParams,
        dimension=double_pendulum.DIMENSION,
        derivative=double_pendulum.derivative,
        initial_state=double_pendulum.initial_state,
        positions=double_pendulum.positions,
        energy=double_pendulum.energy,
    ),
    "lorenz": System(
        name="lorenz",
        params_cls=lorenz.LorenzParams,
        dimension=lorenz.DIMENSION,
        derivative=lorenz.derivative,
        initial_state=lorenz.initial_state,
        positions=lorenz.positions,
    ),
}


def get(name: str) -> System:
    system = REGISTRY.get(name)
    if system is None:
        raise ValueError(f"unknown system '{name}', expected one of {sorted(REGISTRY)}")
    return system


def system_for(params: Any) -> System:
    """Look up the registered system whose parameter type matches `params`."""
    for system in REGISTRY.values():
        if type(params) is system.params_cls:
            return system
    raise ValueError(f"no system registered for parameters of type {type(params).__name__}")


def make_params(name: str, **overrides):
    """Build validated parameters for `name`, dropping overrides left as None."""
    system = get(name)
    kwargs = {k: v for k, v in overrides.items() if v is not None}
    return system.params_cls(**kwargs)
