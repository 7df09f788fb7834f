import os

from setuptools import find_packages, setup


# read the version from the VERSION file
def get_version():
    with open(os.path.join(os.path.dirname(__file__), "VERSION"), "r") as version_file:
        return version_file.read().strip()


# Set the version in the awskit/version.py file
def set_version_constant(version: str):
    with open(os.path.join(os.path.dirname(__file__), "awskit", "version.py"), "w") as version_file:
        version_file.write(f'__version__ = "{version}"\n')


version = get_version()
set_version_constant(version)

setup(
    name="awskit",
    version=version,
    description="Typed AWS service clients generated from the botocore service descriptions",
    packages=find_packages(include=["awskit", "awskit.*"]),
    package_data={"awskit.codegen": ["spec-patches.json"]},
    python_requires=">=3.8",
    install_requires=[
        "beautifulsoup4>=4.9",
        "botocore>=1.31",
        "click>=7.1",
        "jsonpatch>=1.24",
        "python-dateutil>=2.8",
        "requests>=2.25",
        "urllib3>=1.26",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-httpserver>=1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "awskit-codegen=awskit.codegen.cli:main",
        ],
    },
)
