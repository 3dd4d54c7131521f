from setuptools import setup, find_packages

setup(
    name="volatility-modeling",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["models", "exceptions", "run_analysis", "calculate_historical"],
    install_requires=[
        "numpy",
        "pandas",
        "arch",
        "duckdb",
        "matplotlib",
        "seaborn",
        "tqdm",
        "psutil",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "statsmodels",
        ],
    },
    python_requires=">=3.8",
)
