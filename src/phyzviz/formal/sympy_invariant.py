import sympy as sp


def pendulum_energy_rate(damped=True):
    """
    dE/dt for the simple pendulum along its own solutions, after substituting
    theta'' from the equation of motion. Expect -c L^2 theta'^2 (0 if undamped).
    """
    t = sp.symbols('t')
    g, L = sp.symbols('g L', positive=True)
    c = sp.symbols('c', nonnegative=True) if damped else sp.Integer(0)
    theta = sp.Function('theta')(t)
    omega = sp.diff(theta, t)

    # ODE: theta'' = -(g/L) sin(theta) - c theta'
    theta_ddot = -(g / L) * sp.sin(theta) - c * omega

    # Energy per unit mass: E = 1/2 L^2 theta'^2 + g L (1 - cos theta)
    E = sp.Rational(1, 2) * L**2 * omega**2 + g * L * (1 - sp.cos(theta))
    dE = sp.diff(E, t)
    dE_sub = dE.subs(sp.diff(theta, (t, 2)), theta_ddot)
    return sp.simplify(dE_sub)


def expected_energy_rate():
    t = sp.symbols('t')
    L = sp.symbols('L', positive=True)
    c = sp.symbols('c', nonnegative=True)
    theta = sp.Function('theta')(t)
    return -c * L**2 * sp.diff(theta, t)**2


if __name__ == "__main__":
    assert pendulum_energy_rate(damped=False) == 0
    assert sp.simplify(pendulum_energy_rate() - expected_energy_rate()) == 0
    print("SymPy check passed: dE/dt = -c L^2 theta'^2 for the damped pendulum")
