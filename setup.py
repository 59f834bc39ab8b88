from setuptools import setup, find_packages

setup(
    name="trade-feed-generator",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "scripts"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.26.0",
        "pandas>=2.1.0",
        "faker>=20.0.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "pyyaml>=6.0",
        "redis>=5.0.0",
        "fastapi>=0.104.0",
        "uvicorn>=0.24.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "feed-generator=feedgen.cli:main",
        ],
    },
)
