from setuptools import setup, Extension, find_packages
from Cython.Build import cythonize

extensions = [
    Extension(
        name="hpalign._cython.banded_dp",
        sources=["hpalign/_cython/banded_dp.pyx"],
        optional=True,
    )
]

setup(
    name="hpalign",
    version="0.1.0",
    description="Banded, homopolymer-aware pair-HMM alignment likelihoods",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    ext_modules=cythonize(extensions, language_level=3),

    install_requires=[
        "numpy"
    ],
    extras_require={
        "plot": [
            "matplotlib",
            "seaborn",
        ],
        "dev": [
            "pytest>=7.0",
            "pytest-cov",
        ],
        "all": [
            "matplotlib",
            "seaborn",
            "pytest>=7.0",
            "pytest-cov",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    python_requires='>=3.9',
)
