from setuptools import setup, find_namespace_packages

setup(
    name="locallibrary",
    version="0.1.0",
    packages=find_namespace_packages(include=['api*', 'catalog*', 'cli*']),
    include_package_data=True,
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "pydantic>=2",
        "fastapi",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "locallibrary=cli.main:main",
        ],
    },
)
