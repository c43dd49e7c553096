import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="pyhydrots",
    version="0.1.0",
    author="Tyler Hatch",
    author_email="tyler.hatch@water.ca.gov",
    description="python library for hydrologic time series identifiers, storage, and statistics",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/SGMOModeling/pyhydrots.git",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    install_requires=[
        "numpy>=1.24",
        "pydantic>=2.0",
    ],
    extras_require={
        "pandas": ["pandas>=2.0"],
        "test": ["pytest>=7.0", "pandas>=2.0"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
