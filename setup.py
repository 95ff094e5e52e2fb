# setup.py
from setuptools import setup, find_packages

setup(
    name="schema-validator",          # the *distribution* name on PyPI
    version="1.0.0",
    packages=find_packages(include=["schema_validator", "schema_validator.*"]),
    install_requires=["pandas"],      # DataFrame batch validation
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.9",
    description="Schema-driven validator with rule strings, defaults and casting",
    author="Your Name",
    license="Creative Commons Attribution-NonCommercial-ShareAlike 4.0 International License",
)
