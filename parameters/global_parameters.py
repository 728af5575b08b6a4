# global_parameters.py


class GlobalParameters:
    def __init__(self, initial_params=None):
        """
        all parameters are defined with underscore, _, instead of spaces
        """
        # Use a dictionary to store all parameters
        self._params = {
            # Distance below which the barrier becomes active.
            "dhat": 1e-3,
            # Clearance added in front of the barrier. Distances closer than
            # this are treated as intersecting.
            "minimum_distance": 0.0,
            # Clamp negative eigenvalues of local Hessian blocks for
            # Newton-type solvers.
            "project_hessian_to_psd": False,
            # Edge-edge mollifier threshold relative to the product of the
            # squared rest edge lengths.
            "mollifier_threshold_scale": 1e-3,
        }
        # Load initial parameters if provided
        if initial_params:
            self.update(initial_params)

    def __getattr__(self, name):
        """Attribute access for known parameter keys.

        Callers may read parameters either as attributes
        (e.g. ``global_params.dhat``) or through :meth:`get`; the canonical
        storage is the internal ``_params`` dict.
        """
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            return params[name]
        raise AttributeError(
            f"{type(self).__name__!s} object has no attribute {name!r}"
        )

    def __setattr__(self, name, value):
        """Attribute assignment for known parameter keys."""
        if name == "_params":
            object.__setattr__(self, name, value)
            return
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            params[name] = value
            return
        object.__setattr__(self, name, value)

    def get(self, key, default=None):
        """Retrieve a parameter value, or return a default if not found."""
        return self._params.get(key, default)

    def set(self, key, value):
        """Set or update a parameter."""
        self._params[key] = value

    def update(self, params):
        """Update multiple parameters at once."""
        self._params.update(params)

    def __contains__(self, key):
        """Check if a parameter exists."""
        return key in self._params

    def __repr__(self):
        """String representation for debugging."""
        return f"GlobalParameters({self._params})"

    def to_dict(self):
        """Convert the parameters to a dictionary for serialization."""
        return self._params
