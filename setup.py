from setuptools import setup, find_packages

setup(
    name="wayroute",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "python-dotenv",
        "pydantic>=2.0",
        "pydantic-settings",
        "polyline",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    python_requires=">=3.9",
)
