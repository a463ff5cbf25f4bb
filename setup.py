import os

from setuptools import setup

ext_modules = []
if os.environ.get("QUADINT_USE_MYPYC"):
    from mypyc.build import mypycify

    # Only the arithmetic core is compiled; ntheory leans on sympy and stays interpreted.
    ext_modules = mypycify([
        "quadint/ring.py",
        "quadint/quad.py",
    ])

setup(
    name="quadint",
    version="0.1.0",
    description="Exact arithmetic and number theory for integers of imaginary quadratic fields",
    packages=["quadint"],
    python_requires=">=3.9",
    install_requires=["sympy"],
    extras_require={
        "test": ["pytest"],
        "mypyc": ["mypy"],
    },
    ext_modules=ext_modules,

    license="MIT",
)
