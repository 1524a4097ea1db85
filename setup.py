from setuptools import setup, find_packages

setup(
    name="resolution-stability",
    version="0.1.0",
    description="Stability-based selection of the clustering resolution from a Leiden resolution sweep",
    author="FDB",
    author_email="fdb@mail",
    packages=find_packages(exclude=["tests"]),  # finds resolution_stability and its utils
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
        "tqdm",
        "psutil",
        "matplotlib",
        "seaborn"
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "rstab=resolution_stability.cli:main",
        ],
    },
    python_requires=">=3.8",
)
