"""Install Violet auth package."""

from setuptools import setup, find_packages

setup(
    name='violet-auth',
    version='0.1.0',
    packages=find_packages(include=['violet_auth', 'violet_auth.*'],
                           exclude=['*tests*']),
    package_data={'violet_auth': ['templates/*.html']},
    entry_points={
        'console_scripts': ['violet-auth=violet_auth.cli:main'],
    },
    python_requires='>=3.8',
    install_requires=[
        "captcha",
        "click",
        "cryptography",
        "jinja2",
        "pyjwt",
        "python-json-logger",
        "pytz",
        "redis>=4.1",
    ],
    extras_require={
        'test': [
            "fakeredis",
            "mimesis",
            "pillow",
            "pytest",
        ],
    },
    zip_safe=False
)
