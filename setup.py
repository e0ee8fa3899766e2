from setuptools import find_packages, setup

setup(
    name="auditorzk",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2.5",
        "cryptography",
        "click",
        "coincurve>=18",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "auditorzk=auditorzk.cli:cli",
        ],
    },
)
