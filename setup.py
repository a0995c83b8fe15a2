from setuptools import setup, find_packages

setup(
    name="dispatchsim",
    version="0.1.0",
    description="Priority job dispatch onto a worker pool, simulated in virtual time",
    author="adamfilli",
    packages=find_packages(include=["dispatchsim", "dispatchsim.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
