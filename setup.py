"""
Setup script for Music Player.

Install for development with ``pip install -e .[test]``; the ``music-player``
GUI script starts the application.
"""
from setuptools import find_packages, setup

APP_NAME = 'music-player'
VERSION = '1.0.0'

setup(
    name=APP_NAME,
    version=VERSION,
    description='Desktop audio player with shuffle, repeat and persistent favorites',
    packages=find_packages(include=['music_player', 'music_player.*']),
    py_modules=['run_music_player'],
    python_requires='>=3.10',
    install_requires=[
        'PySide6>=6.5',
        'python-dotenv>=1.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'gui_scripts': [
            'music-player = music_player.app:main',
        ],
    },
)
