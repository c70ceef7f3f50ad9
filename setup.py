#!/usr/bin/env python
import os
import re

from setuptools import find_packages, setup


def get_version():
    path = os.path.join(os.path.dirname(__file__), "src", "productpic", "version.py")
    with open(path) as f:
        return re.search(r'__version__ = "([^"]+)"', f.read()).group(1)


setup(
    name="productpic",
    version=get_version(),
    description="Compose product photos on styled backgrounds and export PNGs.",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "attrs>=23.1.0",
        "numpy>=1.22",
        "Pillow>=10.1.0",
        "scipy>=1.8",
    ],
    extras_require={
        "test": [
            "pytest>=7",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "productpic=productpic.__main__:main",
        ],
    },
)
