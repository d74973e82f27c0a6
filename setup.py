"""setuptools setup for Cadence.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup

setup(
    name="cadence-timer",
    version="0.1.0",
    description="Interval timer with pause/resume and an observable lifecycle, on Qt",
    packages=["cadence", "cadence.timer"],
    python_requires=">=3.10",
    install_requires=["PyQt6"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["cadence = cadence.__main__:main"]},
)
