"""
Setup script for github-skill-inference project.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_namespace_packages

setup(
    name="github-skill-inference",
    version="0.1.0",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["version"],
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.0",
        "python-dotenv>=1.0",
        "requests>=2.31",
        "tenacity>=8.2",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
