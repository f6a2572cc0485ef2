from setuptools import setup, find_packages

setup(
    name="feed-resolver",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.8.0,<3.14",
        "feedparser>=6.0.0",
        "python-dotenv>=0.19.0",
        "python-dateutil>=2.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "pytest-xdist>=3.0.0",
            "faker>=18.0.0",
            "aioresponses>=0.7.4",
        ],
        "dev": [
            "black>=23.0.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
            "isort>=5.12.0",
        ]
    },
    python_requires=">=3.8",
)
