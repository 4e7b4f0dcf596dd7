from setuptools import setup, find_packages

setup(
    name="ContrastPower",
    version="0.1.0",
    packages=find_packages(include=["contrastpower", "contrastpower.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "pandas",
        "matplotlib",
        "scipy",
        "joblib>=1.3",
    ],
    extras_require={
        "progress": ["tqdm"],
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["contrastpower=contrastpower.cli:main"],
    },
    description="Monte Carlo power analysis of contrast measures on synthetic data",
)
