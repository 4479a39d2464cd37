# setup.py
from setuptools import setup, find_packages

setup(
    name="literary_graphs",
    version="0.1.0",
    description="Interactive force layout, analytics and filtering for literary exploration graphs",
    packages=find_packages(
        exclude=(
            "tests",
            "tests.*",
            "docs",
            "build",
            "dist",
        )
    ),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24",
        "networkx>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
)
