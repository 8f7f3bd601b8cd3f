"""Integrator facade.

This module re-exports the integration algorithm so the rest of the project can
depend on a stable import path:

	from mortality import integrators
"""

from __future__ import annotations

from .runge_kutta_integrators import (
	DerivativeFunction,
	InvalidArgument,
	NonFiniteDerivative,
	Trajectory,
	rk4_integrate,
	rk4_step,
)

# Shorter alias used by callers that only ever need the one method.
integrate = rk4_integrate

__all__ = [
	"DerivativeFunction",
	"InvalidArgument",
	"NonFiniteDerivative",
	"Trajectory",
	"integrate",
	"rk4_integrate",
	"rk4_step",
]
