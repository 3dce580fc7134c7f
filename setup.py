"""
setup.py for the inferopt Python package.

The core (regularized predictors, perturbed maximizers, structured losses)
only needs NumPy and SciPy. The PyTorch layers are an optional extra:

    pip install -e .            # NumPy/SciPy core
    pip install -e ".[torch]"   # + differentiable nn.Module layers
    pip install -e ".[dev]"     # + test and lint tooling
"""

from setuptools import find_packages, setup

setup(
    name="inferopt",
    version="0.2.0",
    description="Combinatorial optimization layers for machine learning pipelines",
    package_dir={"": "python"},
    packages=find_packages(where="python"),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "scipy>=1.7",
    ],
    extras_require={
        "torch": [
            "torch>=1.13",
        ],
        "test": [
            "pytest>=7.0",
            "hypothesis>=6.0",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "hypothesis>=6.0",
            "torch>=1.13",
            "black>=23.0",
            "ruff>=0.1.0",
            "mypy>=1.0",
        ],
    },
)
