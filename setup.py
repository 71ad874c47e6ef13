import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="fnvtable",
    version="0.1.0",
    description="Open-addressing hash table over byte-string keys with FNV-1a hashing",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=["fnvtable", "fnvtable.*"]),
    install_requires=[
        "jax>=0.4.0",
        "chex>=0.1.0",
        "numpy>=1.24",
        "tabulate>=0.9.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
        ],
        "benchmarks": [
            "rich>=13.0.0",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
