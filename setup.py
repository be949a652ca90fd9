"""Setup configuration for polypower package"""

from setuptools import setup, find_packages

setup(
    name="polypower",
    version="0.1.0",
    author="polypower Development Team",
    description="Monte Carlo power analysis for additive polygenic genotype-phenotype association studies",
    long_description=open("README.md").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["polypower", "polypower.*"]),
    install_requires=[
        "numpy>=1.19.0",
        "scipy>=1.6.0",
        "pandas>=1.2.0",
        "joblib>=1.0.0",
        "tqdm>=4.60.0",
    ],
    extras_require={
        # Test suite; statsmodels is the independent BH reference
        "test": [
            "pytest>=7.0",
            "statsmodels>=0.12.0",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
    ],
)
