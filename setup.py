"""Setup script for picodsl; ensures package discovery works with setuptools."""
from setuptools import setup, find_packages

# Explicit package discovery for reliable build (editable and wheel)
setup(
    name="picodsl",
    version="0.1.0",
    description="Declare continuous-delivery pipeline topologies and compile them into dependency graphs",
    python_requires=">=3.9",
    packages=find_packages(where=".", include=("picodsl", "picodsl.*")),
    package_dir={"": "."},
    install_requires=[
        "networkx>=3.0",
        "omegaconf>=2.3",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
