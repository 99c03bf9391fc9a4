from setuptools import setup, find_packages

# -------------------------------------------------
# Dependencies
# -------------------------------------------------

install_requires = [
    "numpy>=1.21",
    "PyYAML>=6.0",
    "psutil>=5.9",
]

extras_require = {
    "test": [
        "pytest>=7.0",
    ],
}

# -------------------------------------------------
# Setup
# -------------------------------------------------

setup(
    name="seqalign",
    version="1.0.0",
    description="Optimal pairwise sequence alignment with constant and affine gap costs",
    python_requires=">=3.8",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"seqalign.config": ["default_config.yaml"]},
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    zip_safe=False,
)
