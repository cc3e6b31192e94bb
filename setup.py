from setuptools import setup, find_packages

setup(
    name="recipe_web",
    version="1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"recipe_web": ["templates/*.html", "templates/*.css"]},
    description="Parse, scale and rank RecipeMD recipes collected from git repositories.",
    python_requires=">=3.8",
    install_requires=[
        "marko>=2.2.0",
        "lxml",
        "jinja2",
        "thefuzz>=0.20.0",
        "langdetect",
        "pydantic>=2",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "recipe-web=recipe_web.scripts.recipe_web:main",
            "recipe-web-list=recipe_web.scripts.recipe_web_list:main",
        ],
    },
)
