from setuptools import setup, find_packages

setup(
    name="budget_verifier",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pandas",
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "budget-verifier=budget_verifier.reconcile:main",
        ],
    },
    author="Price Hatfield",
    description="A tool for finding bank transactions missing from a budget export",
    python_requires=">=3.8",
)
