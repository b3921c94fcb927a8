"""
Python package configuration for bayes-regression-primer.

This setup script configures the package for distribution and installation,
defining metadata, dependencies, and entry points.
"""
from setuptools import setup, find_packages

# Read the long description from README.md
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Parse requirements from requirements.txt
with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh.readlines() if line.strip()]

setup(
    name="bayes-regression-primer",
    version="0.1.0",
    description="Lessons on specifying, sampling and visually diagnosing Bayesian regression models",

    long_description=long_description,
    long_description_content_type="text/markdown",

    # Top-level packages: model, data, config, utils
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],

    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],

    python_requires=">=3.10",

    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },

    entry_points={
        "console_scripts": [
            "bayes-primer=main:main",
        ],
    },
)
