import os

from setuptools import setup, find_packages

about = {}
with open(os.path.join(os.path.dirname(__file__), "wfmt", "version.py")) as f:
    exec(f.read(), about)

setup(
    name="wfmt",
    version=about["__version__"],
    description="printf-style formatting with display-width-aware padding",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "lark>=1.1.5",
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "typer>=0.9.0",
        "pydantic>=2.0.0",
        "numpy>=1.22",
        "wcwidth>=0.2.9",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "wfmt=wfmt.main:app",
        ],
    },
    python_requires=">=3.9",
)
