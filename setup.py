from setuptools import setup, find_packages
setup(
    name="coach-advisor",
    version="0.3.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"coach_advisor.db": ["schema_pg.sql"]},
    python_requires=">=3.10",
    install_requires=[
        "click>=8.1.7",
        "python-dotenv>=1.0.1",
        "pydantic>=2.8.2",
        "pydantic-settings>=2.0.0",
        "openai>=1.42.0,<2",
        "psycopg[binary]>=3.1",
        "fastapi>=0.110",
        "uvicorn>=0.29",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "httpx>=0.27",
        ],
    },
    entry_points={
        "console_scripts": [
            "coach-advisor=coach_advisor.cli:main",
        ],
    },
)
