from setuptools import setup, find_packages

setup(
    name="msmbt",
    version="0.1.0",
    author="MSM-BT Python Contributors",
    author_email="",
    description="Markov Switching Multifractal volatility model, binomial-tree variant",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.19.0",
        "scipy>=1.5.0",
        "pandas>=1.1.0",
    ],
    extras_require={
        "dev": ["pytest>=6.0", "black", "flake8"],
    },
    entry_points={
        "console_scripts": ["msmbt=msmbt.cli:main"],
    },
)
