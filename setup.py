from setuptools import setup, find_packages

setup(
    name="school-signage",
    version="0.1.0",
    description="Digital signage server and display player for schools",
    author="Matt Skillman",
    packages=find_packages(include=["signage", "signage.*"]),
    python_requires=">=3.8",
    install_requires=[
        "Flask>=3.0.0",
        "Flask-SQLAlchemy>=3.1.0",
        "SQLAlchemy>=2.0.0",
        "Flask-Migrate>=4.0.0",
        "Flask-Login>=0.6.3",
        "Flask-Limiter>=3.5.0",
        "flask-talisman>=1.1.0",
        "click>=8.1.0",
        "PyYAML>=6.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
        "dev": [
            "pytest>=7.4.0",
            "black>=23.0.0",
            "pylint>=2.17.0",
        ]
    },
)
