from setuptools import setup, find_packages

setup(
    name="edgesweep",
    version="0.1.0",
    packages=find_packages(include=["edgesweep", "edgesweep.*"]),
    install_requires=[
        "networkx>=3.0",
        "numpy>=2.0.0",
        "matplotlib>=3.8.0",
        "shapely>=2.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
)
