from setuptools import setup, find_packages

setup(
    name="manupedia",
    version="0.1",
    packages=find_packages(include=["manupedia", "manupedia.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "pydantic>=2.0",
        "pydantic-settings",
        "python-multipart",
        "python-jose[cryptography]",
        "minio",
    ],
    extras_require={
        "postgres": ["psycopg2-binary"],
        "test": ["pytest", "httpx"],
    },
    python_requires=">=3.10",
)
