from setuptools import setup, find_packages

setup(
    name="lemkehowson",
    version="0.1.0",
    packages=find_packages(include=["lemkehowson", "lemkehowson.*"]),
    install_requires=[
        "numpy",
        "torch",
        "matplotlib",
        "tabulate"
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ],
    },
)
