from setuptools import setup, find_namespace_packages

setup(
    name="abtest-orchestration",
    version="1.0.0",
    packages=find_namespace_packages(include=["src.abtest", "src.abtest.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pandas>=1.5.0",
        "Jinja2>=3.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
