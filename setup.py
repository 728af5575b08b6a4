from __future__ import annotations

from setuptools import find_namespace_packages, setup

# The library lives in top-level namespace packages (no __init__.py), plus the
# `ipc_potentials` helper package and the root `logging_config` module.
PACKAGES = find_namespace_packages(
    include=[
        "core",
        "core.*",
        "parameters",
        "parameters.*",
        "geometry",
        "geometry.*",
        "modules",
        "modules.*",
        "runtime",
        "runtime.*",
        "ipc_potentials",
        "ipc_potentials.*",
    ]
)


setup(
    name="ipc-potentials",
    version="0.1.0",
    description="Barrier contact potentials for incremental potential contact",
    python_requires=">=3.10",
    packages=PACKAGES,
    py_modules=["logging_config"],
    install_requires=[
        "numpy",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
