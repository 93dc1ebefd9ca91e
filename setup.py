import os
import re
from setuptools import setup


def build_install_requires(path):
    """Support pip-type requirements files"""
    basedir = os.path.dirname(path)
    with open(path) as f:
        reqs = []
        for line in f:
            line = line.strip()
            if not line:
                continue
            if line[0] == '#':
                continue
            elif line.startswith('-r '):
                nested_req = line[3:].strip()
                nested_path = os.path.join(basedir, nested_req)
                reqs += build_install_requires(nested_path)
            elif line[0] == '-':
                continue
            else:
                reqs.append(line)
        return reqs


def read_version(path):
    with open(path) as fp:
        match = re.search(r"^VERSION = ['\"]([^'\"]+)['\"]", fp.read(), re.M)
    return match.group(1)


root = os.path.dirname(os.path.abspath(__file__))
from_root = lambda *p: os.path.join(root, *p)

version = read_version(from_root('sapper', 'version.py'))

with open(from_root('README.rst')) as fp:
    long_description = fp.read()


if __name__ == '__main__':
    setup(
        name='sapper',
        version=version,
        description='Terminal minesweeper with saved games and move-by-move replays',
        long_description=long_description,
        packages=['sapper', 'sapper.storage'],
        python_requires='>=3.8',
        install_requires=build_install_requires(from_root('requirements.txt')),
        extras_require={
            'test': build_install_requires(from_root('requirements-test.txt')),
        },
        entry_points={
            'console_scripts': ['sapper=sapper.main:main'],
        },
        classifiers=[
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
            'Operating System :: OS Independent',
            'License :: OSI Approved :: MIT License',
        ],
    )
