from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="online-rf",
    version="0.1.0",
    description="Online random forest classifier with online bagging and temporal knowledge weighting.",
    packages=find_packages(include=["online_rf", "online_rf.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.25",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
