from setuptools import find_packages, setup

REQUIRED = [
    "jax[cpu]",
    "numpy",
    "pandas>=2.2.0",
]


EXTRAS = {
    "dev": [
        "black",
        "isort",
        "pytest",
    ],
}

setup(
    name="rtsynapse",
    python_requires=">=3.8.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=REQUIRED,
    extras_require=EXTRAS,
)
