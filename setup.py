# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="codespectrum",
    version="0.1.0",
    description="Per-line syntactic category statistics for C-family source trees",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["codespectrum*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
