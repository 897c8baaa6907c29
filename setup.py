# setup.py

from setuptools import setup, find_packages


# --- Developer Customization Section ---
# Runtime settings are read from the environment by mclang.config:
#   MCLANG_EPSILON     numeric tolerance for probability checks
#   MCLANG_MAX_QUBITS  largest joint state the simulator will allocate
#   MCLANG_SEED        default seed for shot sampling
# --- End Customization Section ---

setup(
    name="mclang",
    version="0.1.0",
    description="Measurement-calculus language and simulator for measurement-based quantum computing",
    long_description="This package provides a checker, a pattern compiler and an exact or sampled state-vector simulator for measurement-calculus programs.",
    packages=find_packages(include=["mclang", "mclang.*"]),
    zip_safe=False,
    python_requires=">=3.8",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
