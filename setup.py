from setuptools import setup, find_packages

setup(
    name='pynav',
    version='0.1',
    packages=find_packages(include=['pynav', 'pynav.*']),
    install_requires=[
        'numpy>=1.22',
        'pandas>=1.4',
        'yfinance>=0.2',
        'requests>=2.31'
    ],
    extras_require={
        'test': ['pytest>=7.0']
    },
    description='pynav: historical NAV, VaR/CVaR and return statistics for weighted portfolios',
    license='MIT',
    python_requires='>=3.8'
)
