"""Local dtype policy for kdspatial coordinates."""

import jax.numpy as jnp

# Distances are compared in double precision on every query path.
COORD_DTYPE = jnp.float64


def as_coords(x):
    """Convert a scalar/array to the kdspatial coordinate dtype."""
    return jnp.asarray(x, dtype=COORD_DTYPE)


__all__ = ["COORD_DTYPE", "as_coords"]
